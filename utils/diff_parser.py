#!/usr/bin/env python3
"""Unified diff parsing.

Turns the lines of one file's diff (``diff ...`` header through the line
before the next header) into a structural ``Diff``: file identity plus hunk
boundaries as index ranges into the diff's own line storage.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Tuple

from utils.diff_models import CommitParseError, Diff, DiffHunk, LineKind, ParseDiagnostic

logger = logging.getLogger(__name__)


GIT_HEADER_PREFIX = "diff --git "
GIT_HEADER_RE = re.compile(r"^diff --git a/(?P<old>.+?) b/(?P<new>.+)$")
QUOTED_HEADER_RE = re.compile(r'^diff --git "a/(?P<old>(?:[^"\\]|\\.)*)" "b/(?P<new>(?:[^"\\]|\\.)*)"$')
COMBINED_HEADER_RE = re.compile(r"^diff --(?:cc|combined) (?P<file>.+)$")
HUNK_HEADER_RE = re.compile(r"^@@+ .*? @@+")
QUOTED_ESCAPE_RE = re.compile(r'\\([0-7]{3}|.)')

QUOTED_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}

# Extended header lines naming the post-image path
TARGET_PREFIXES = ("rename to ", "copy to ")

# Extended header prefix -> diff kind, first match wins
KIND_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("new file mode", "new file"),
    ("deleted file mode", "deleted"),
    ("rename from", "renamed"),
    ("copy from", "copied"),
)


def is_hunk_header(line: str) -> bool:
    return bool(HUNK_HEADER_RE.match(line))


def classify_line(line: str) -> LineKind:
    """Classify a hunk body line by its leading character."""
    if line.startswith("+"):
        return "addition"
    if line.startswith("-"):
        return "deletion"
    return "context"


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of paths with special or non-ASCII characters."""
    if len(path) < 2 or path[0] != '"' or path[-1] != '"':
        return path
    out = bytearray()
    pos = 0
    inner = path[1:-1]
    for m in QUOTED_ESCAPE_RE.finditer(inner):
        out += inner[pos:m.start()].encode("utf-8")
        esc = m.group(1)
        if len(esc) == 3:
            out.append(int(esc, 8))
        else:
            out += QUOTED_ESCAPES.get(esc, esc).encode("utf-8")
        pos = m.end()
    out += inner[pos:].encode("utf-8")
    return out.decode("utf-8", errors="replace")


def _parse_header(header: str) -> Tuple[Optional[str], str]:
    """Return (combined-kind-or-None, file) for a diff header line, or (None, "")."""
    m = QUOTED_HEADER_RE.match(header)
    if m:
        return None, unquote_path(f'"{m.group("new")}"')
    if header.startswith(GIT_HEADER_PREFIX):
        # "a/<p> b/<p>" splits unambiguously when both sides name the same path
        rest = header[len(GIT_HEADER_PREFIX):]
        size = (len(rest) - 5) // 2
        path = rest[2 : 2 + size]
        if size > 0 and rest == f"a/{path} b/{path}":
            return None, path
    m = GIT_HEADER_RE.match(header)
    if m:
        return None, m.group("new")
    m = COMBINED_HEADER_RE.match(header)
    if m:
        return "unmerged", m.group("file")
    return None, ""


def _target_path(extended_header: Sequence[str]) -> str:
    """Post-image path from 'rename to'/'copy to' or '+++ b/' lines, if any."""
    for line in extended_header:
        for prefix in TARGET_PREFIXES:
            if line.startswith(prefix):
                return unquote_path(line[len(prefix):])
        if line.startswith("+++ "):
            target = unquote_path(line[4:].rstrip("\t"))
            if target.startswith("b/"):
                return target[2:]
    return ""


def _infer_kind(extended_header: Sequence[str]) -> str:
    for line in extended_header:
        for prefix, kind in KIND_PREFIXES:
            if line.startswith(prefix):
                return kind
    return "modified"


def _find_hunks(lines: Sequence[str]) -> List[DiffHunk]:
    starts = [idx for idx, line in enumerate(lines) if idx > 0 and is_hunk_header(line)]
    hunks: List[DiffHunk] = []
    for pos, start in enumerate(starts):
        end = starts[pos + 1] - 1 if pos + 1 < len(starts) else len(lines) - 1
        hunks.append(DiffHunk(header_line_index=start, start_index=start, end_index=end))
    return hunks


def parse_diff(lines: Sequence[str]) -> Diff:
    """Parse one file's diff slice.

    Args:
        lines: Raw lines from the ``diff ...`` header to the end of this file's diff

    Returns:
        Diff owning a copy of ``lines``; an unrecognised header leaves
        ``kind``/``file`` empty and is reported in ``diagnostics``

    Raises:
        CommitParseError: If ``lines`` is empty
    """
    if not lines:
        raise CommitParseError("Diff slice is empty; expected at least a header line", expected=1, available=0)

    owned = list(lines)
    hunks = _find_hunks(owned)
    diagnostics: List[ParseDiagnostic] = []

    combined_kind, file = _parse_header(owned[0])
    if not file:
        kind = ""
        diagnostics.append(
            ParseDiagnostic(
                field="diff_header",
                line_index=0,
                line=owned[0],
                message="Diff header does not match 'diff --git a/<path> b/<path>'",
            )
        )
    else:
        first_hunk = hunks[0].start_index if hunks else len(owned)
        extended = owned[1:first_hunk]
        kind = combined_kind or _infer_kind(extended)
        if combined_kind is None:
            file = _target_path(extended) or file

    logger.debug(f"Parsed diff for {file or '<unknown>'}: kind={kind}, hunks={len(hunks)}, lines={len(owned)}")
    return Diff(kind=kind, file=file, lines=owned, hunks=hunks, diagnostics=diagnostics)
