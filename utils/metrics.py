#!/usr/bin/env python3
"""Commit view metrics: stage latencies and diagnostic counts as JSONL.

Disabled unless METRICS_ENABLED=1. Records carry the metric name, a number,
and the abbreviated commit id; commit text never leaves the process here.
"""

from __future__ import annotations

import json
import time
from collections import Counter
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Sequence

from configs.config import Config
from utils.diff_models import ParseDiagnostic

METRICS_FILE = "metrics.log"


def _write(record: Dict[str, Any]) -> None:
	root = Path(Config.METRICS_ROOT)
	root.mkdir(parents=True, exist_ok=True)
	with open(root / METRICS_FILE, "a", encoding="utf-8") as f:
		f.write(json.dumps(record, separators=(",", ":")) + "\n")


def emit(metric: str, value: float, oid: Optional[str] = None, **extra: Any) -> None:
	if not Config.METRICS_ENABLED:
		return
	record: Dict[str, Any] = {"ts": int(time.time()), "metric": metric, "value": value}
	if oid:
		record["oid"] = oid
	record.update(extra)
	_write(record)


@contextmanager
def timed(stage: str, oid: Optional[str] = None) -> Iterator[None]:
	"""Emit ``<stage>.latency_s`` once the block finishes, raised or not."""
	t0 = time.perf_counter()
	try:
		yield
	finally:
		emit(f"{stage}.latency_s", time.perf_counter() - t0, oid=oid)


def count_diagnostics(stage: str, diagnostics: Sequence[ParseDiagnostic], oid: Optional[str] = None) -> None:
	"""Emit ``<stage>.diagnostics`` with the total and a per-code breakdown."""
	if not diagnostics:
		return
	codes = Counter(d.code for d in diagnostics)
	emit(f"{stage}.diagnostics", len(diagnostics), oid=oid, codes=dict(codes))
