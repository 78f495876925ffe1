#!/usr/bin/env python3
"""Project a parsed commit onto a RenderModel.

The layout follows ``git show``: a short header, the fuller metadata block,
the message, the diffstat table with per-column highlights, then every hunk
of every diff with add/delete markers.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from configs.config import Config
from utils.commit_models import CommitInfo, CommitOverview, CommitOverviewFile
from utils.diff_parser import classify_line
from utils.render_model import ProjectionError, RenderBuilder, RenderModel

logger = logging.getLogger(__name__)


class Marker:
	HEADER = "CommitViewHeader"
	DESCRIPTION = "CommitViewDescription"
	HUNK_HEADER = "HunkHeader"
	DIFF_ADD = "DiffAdd"
	DIFF_DELETE = "DiffDelete"


class Style:
	FILE_PATH = "FilePath"
	NUMBER = "Number"
	DIFF_ADD = "DiffAdd"
	DIFF_DELETE = "DiffDelete"


LINE_MARKERS = {
	"addition": Marker.DIFF_ADD,
	"deletion": Marker.DIFF_DELETE,
}

LABEL_WIDTH = 12

Span = Tuple[int, int, str]


def _field(label: str, value: str) -> str:
	return f"{label:<{LABEL_WIDTH}}{value}"


def _identity(name: str, email: str) -> str:
	return f"{name} <{email}>"


def format_overview_row(file: CommitOverviewFile) -> Tuple[str, List[Span]]:
	"""Build a diffstat row and the spans of its path, count, '+' and '-' columns.

	Binary rows show their size change in the count column. Text and spans
	come from the same segment list, so the spans always index the returned
	text.
	"""
	segments: List[Tuple[str, Optional[str]]] = [
		(file.path, Style.FILE_PATH),
		(" | ", None),
		(file.count_text(), Style.NUMBER),
		(" " if file.insertions or file.deletions else "", None),
		(file.insertions, Style.DIFF_ADD),
		(file.deletions, Style.DIFF_DELETE),
	]
	spans: List[Span] = []
	offset = 0
	for text, style in segments:
		if style is not None:
			spans.append((offset, offset + len(text), style))
		offset += len(text)
	return "".join(text for text, _ in segments), spans


def _ensure_renderable(info: CommitInfo, overview: CommitOverview) -> None:
	if not Config.FAIL_ON_MALFORMED:
		return
	problems = info.all_diagnostics() + overview.diagnostics
	if problems:
		first = problems[0]
		raise ProjectionError(
			f"Refusing to render commit with {len(problems)} parse diagnostic(s); "
			f"first: {first.field} at line {first.line_index}: {first.message}",
			code="MALFORMED_INPUT",
		)


def project_commit(info: CommitInfo, overview: CommitOverview) -> RenderModel:
	"""Build the RenderModel for a commit and its diffstat.
	
	Raises:
		ProjectionError: In strict mode when either record carries diagnostics,
			or if a decoration ends up outside the emitted text
	"""
	_ensure_renderable(info, overview)
	out = RenderBuilder()

	out.append_marked(f"Commit {info.abbrev()}", Marker.HEADER)
	out.append_line(f"{Config.REMOTE_PLACEHOLDER} {info.oid}")
	if info.merge_parents:
		out.append_line(_field("Merge:", " ".join(info.merge_parents)))
	out.append_line(_field("Author:", _identity(info.author_name, info.author_email)))
	out.append_line(_field("AuthorDate:", info.author_date))
	out.append_line(_field("Commit:", _identity(info.committer_name, info.committer_email)))
	out.append_line(_field("CommitDate:", info.committer_date))
	out.append_line("")
	for line in info.description:
		out.append_marked(line, Marker.DESCRIPTION)

	out.append_line("")
	out.append_line(overview.summary)
	for file in overview.files:
		text, spans = format_overview_row(file)
		idx = out.append_line(text)
		for start, end, style in spans:
			out.add_highlight(idx, start, end, style)

	for diff in info.diffs:
		out.append_line("")
		out.append_line(f"{diff.kind} {diff.file}")
		for hunk in diff.hunks:
			out.append_marked(diff.header_line(hunk), Marker.HUNK_HEADER)
			for line in diff.body_lines(hunk):
				idx = out.append_line(line)
				marker = LINE_MARKERS.get(classify_line(line))
				if marker:
					out.add_marker(idx, marker)

	model = out.build()
	logger.info(
		f"Projected commit {info.abbrev()}: lines={len(model.lines)}, "
		f"markers={len(model.markers)}, highlights={len(model.highlights)}"
	)
	return model
