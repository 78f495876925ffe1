#!/usr/bin/env python3
"""Parsers for ``git show`` output.

Two grammars are handled here:

- ``git show --format=fuller <commit>``: a positional header block, the
  commit message, then one unified diff per changed file (delegated to
  ``utils.diff_parser``).
- ``git show --stat --oneline <commit>``: a subject line, one diffstat row
  per file, and a summary line.

Missing required lines raise ``CommitParseError``. Lines that are present but
do not match their expected shape leave the field empty and are reported as
``ParseDiagnostic`` entries on the returned record.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Tuple

from utils.commit_models import CommitInfo, CommitOverview, CommitOverviewFile
from utils.diff_models import CommitParseError, Diff, ParseDiagnostic
from utils.diff_parser import parse_diff

logger = logging.getLogger(__name__)


COMMIT_RE = re.compile(r"^commit (?P<oid>\w+)")
MERGE_RE = re.compile(r"^Merge:\s*(?P<parents>\S.*?)\s*$")
AUTHOR_RE = re.compile(r"^Author:\s*(?P<name>.*?)\s*<(?P<email>[^<>]*)>\s*$")
AUTHOR_DATE_RE = re.compile(r"^AuthorDate:\s*(?P<date>.+?)\s*$")
COMMITTER_RE = re.compile(r"^Commit:\s*(?P<name>.*?)\s*<(?P<email>[^<>]*)>\s*$")
COMMITTER_DATE_RE = re.compile(r"^CommitDate:\s*(?P<date>.+?)\s*$")

DIFFSTAT_ROW_RE = re.compile(
    r"^\s*(?P<path>\S.*?)\s+\|\s+(?P<changes>\d+)(?:\s+(?P<insertions>\+*)(?P<deletions>-*))?\s*$"
)
BINARY_ROW_RE = re.compile(r"^\s*(?P<path>\S.*?)\s+\|\s+(?P<binary>Bin(?: \d+ -> \d+ bytes)?)\s*$")

# commit, Author, AuthorDate, Commit, CommitDate, separator
PREAMBLE_LINES = 6


class _LineCursor:
    """Forward-only reader over the header block that fails loudly on shortage."""

    def __init__(self, lines: Sequence[str], required: int) -> None:
        self.lines = lines
        self.required = required
        self.index = 0

    def peek(self) -> Optional[str]:
        if self.index >= len(self.lines):
            return None
        return self.lines[self.index]

    def take(self, what: str) -> Tuple[int, str]:
        if self.index >= len(self.lines):
            raise CommitParseError(
                f"Commit header too short while reading {what}: expected at least "
                f"{self.required} lines, got {len(self.lines)}",
                expected=self.required,
                available=len(self.lines),
            )
        idx = self.index
        self.index += 1
        return idx, self.lines[idx]

    def take_optional(self) -> Optional[str]:
        line = self.peek()
        if line is not None:
            self.index += 1
        return line


def _match_field(
    pattern: re.Pattern[str],
    cursor: _LineCursor,
    field: str,
    label: str,
    diagnostics: List[ParseDiagnostic],
) -> Optional[re.Match[str]]:
    idx, line = cursor.take(field)
    m = pattern.match(line)
    if m is None:
        diagnostics.append(
            ParseDiagnostic(
                field=field,
                line_index=idx,
                line=line,
                message=f"Expected a '{label}' line",
            )
        )
    return m


def _split_diffs(lines: Sequence[str], offset: int, diagnostics: List[ParseDiagnostic]) -> List[Diff]:
    """Cut the diff region at every line starting with 'diff' and parse each slice."""
    diffs: List[Diff] = []
    current: List[str] = []
    orphans = 0
    for line in lines:
        if line.startswith("diff"):
            if current:
                diffs.append(parse_diff(current))
            current = [line]
        elif current:
            current.append(line)
        else:
            orphans += 1
    if current:
        diffs.append(parse_diff(current))
    if orphans:
        diagnostics.append(
            ParseDiagnostic(
                code="ORPHAN_LINES",
                field="diffs",
                line_index=offset,
                line=lines[0],
                message=f"Dropped {orphans} line(s) before the first diff header",
            )
        )
    return diffs


def parse_commit_info(raw: Sequence[str]) -> CommitInfo:
    """Parse the full output of ``git show --format=fuller``.
    
    Args:
        raw: Output lines, without trailing newlines
        
    Returns:
        CommitInfo with header fields, description and one Diff per file
        
    Raises:
        CommitParseError: If the header block is shorter than required
    """
    required = PREAMBLE_LINES
    if len(raw) > 1 and raw[1].startswith("Merge:"):
        required += 1
    cursor = _LineCursor(raw, required)
    diagnostics: List[ParseDiagnostic] = []

    m = _match_field(COMMIT_RE, cursor, "oid", "commit <oid>", diagnostics)
    oid = m.group("oid") if m else ""

    merge_parents: List[str] = []
    if required > PREAMBLE_LINES:
        m = _match_field(MERGE_RE, cursor, "merge_parents", "Merge:", diagnostics)
        merge_parents = m.group("parents").split() if m else []

    m = _match_field(AUTHOR_RE, cursor, "author", "Author:", diagnostics)
    author_name, author_email = (m.group("name"), m.group("email")) if m else ("", "")
    m = _match_field(AUTHOR_DATE_RE, cursor, "author_date", "AuthorDate:", diagnostics)
    author_date = m.group("date") if m else ""
    m = _match_field(COMMITTER_RE, cursor, "committer", "Commit:", diagnostics)
    committer_name, committer_email = (m.group("name"), m.group("email")) if m else ("", "")
    m = _match_field(COMMITTER_DATE_RE, cursor, "committer_date", "CommitDate:", diagnostics)
    committer_date = m.group("date") if m else ""

    # separator before the message
    cursor.take("message separator")

    # git indents blank message lines, so only a truly empty line ends the message
    description: List[str] = []
    line = cursor.take_optional()
    while line is not None and line != "":
        description.append(line.strip())
        line = cursor.take_optional()

    offset = cursor.index
    diffs = _split_diffs(raw[offset:], offset, diagnostics)

    info = CommitInfo(
        oid=oid,
        merge_parents=merge_parents,
        author_name=author_name,
        author_email=author_email,
        author_date=author_date,
        committer_name=committer_name,
        committer_email=committer_email,
        committer_date=committer_date,
        description=description,
        diffs=diffs,
        diagnostics=diagnostics,
    )
    logger.info(
        f"Parsed commit {info.abbrev() or '<unknown>'}: {len(description)} description lines, "
        f"{len(diffs)} diffs, {len(info.all_diagnostics())} diagnostics"
    )
    return info


def parse_overview_row(line: str) -> Optional[CommitOverviewFile]:
    """Parse one diffstat row such as ``' src/foo.py | 12 +++++++-----'``.

    Binary rows (``' img.png | Bin 0 -> 1234 bytes'``) parse with ``changes=0``
    and the size change kept in ``binary``.
    """
    m = BINARY_ROW_RE.match(line)
    if m is not None:
        return CommitOverviewFile(path=m.group("path"), changes=0, binary=m.group("binary"))
    m = DIFFSTAT_ROW_RE.match(line)
    if m is None:
        return None
    return CommitOverviewFile(
        path=m.group("path"),
        changes=int(m.group("changes")),
        insertions=m.group("insertions") or "",
        deletions=m.group("deletions") or "",
    )


def parse_commit_overview(raw: Sequence[str]) -> CommitOverview:
    """Parse the output of ``git show --stat --oneline``.
    
    The first line (the one-line subject) is skipped and the last line is the
    summary. Every row in between is a diffstat row; binary rows are kept
    with their size change. Rows matching neither shape are reported in
    ``diagnostics`` and left out of ``files``.
    
    Raises:
        CommitParseError: If ``raw`` is empty
    """
    if not raw:
        raise CommitParseError("Diffstat output is empty; expected at least a summary line", expected=1, available=0)

    files: List[CommitOverviewFile] = []
    diagnostics: List[ParseDiagnostic] = []
    for idx in range(1, len(raw) - 1):
        row = parse_overview_row(raw[idx])
        if row is None:
            diagnostics.append(
                ParseDiagnostic(
                    field="diffstat_row",
                    line_index=idx,
                    line=raw[idx],
                    message="Expected '<path> | <changes> <+++><--->' or '<path> | Bin <old> -> <new> bytes'",
                )
            )
            continue
        files.append(row)

    overview = CommitOverview(summary=raw[-1].strip(), files=files, diagnostics=diagnostics)
    logger.info(f"Parsed diffstat: files={len(files)}, diagnostics={len(diagnostics)}")
    return overview
