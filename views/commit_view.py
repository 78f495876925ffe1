#!/usr/bin/env python3
"""Commit view: parse ``git show`` output and present it on a display host.

The view owns the parsed commit and its diffstat, projects them into a
RenderModel and pushes text plus decorations into a host. Running git is up
to the caller; the CLI reads both outputs from files.
"""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import load_dotenv

# Load environment variables from .env file before Config is read
load_dotenv()

from clients.console_host import ConsoleHost, DisplayHost, HostError  # noqa: E402
from utils.commit_models import CommitInfo, CommitOverview  # noqa: E402
from utils.commit_parser import parse_commit_info, parse_commit_overview  # noqa: E402
from utils.commit_projector import project_commit  # noqa: E402
from utils.diff_models import CommitParseError, ParseDiagnostic  # noqa: E402
from utils.metrics import count_diagnostics, timed  # noqa: E402
from utils.render_model import ProjectionError, RenderModel  # noqa: E402

# Set up logging
logger = logging.getLogger(__name__)


def read_lines(path: str) -> List[str]:
	"""Read a text blob as lines; ``-`` reads stdin."""
	if path == "-":
		return sys.stdin.read().splitlines()
	return Path(path).read_text(encoding="utf-8").splitlines()


class CommitView:
	"""A commit panel bound to at most one open display host."""
	
	def __init__(self, commit_info: CommitInfo, commit_overview: CommitOverview):
		self.commit_info = commit_info
		self.commit_overview = commit_overview
		self.host: Optional[DisplayHost] = None
		self.is_open = False
	
	@classmethod
	def from_output(cls, show_lines: Sequence[str], stat_lines: Sequence[str]) -> "CommitView":
		"""Create a view from ``git show --format=fuller`` and ``git show --stat --oneline`` lines.
		
		Raises:
			CommitParseError: If either output is structurally short
		"""
		with timed("commit_view.parse"):
			info = parse_commit_info(show_lines)
			overview = parse_commit_overview(stat_lines)
		diagnostics = info.all_diagnostics() + overview.diagnostics
		count_diagnostics("commit_view", diagnostics, oid=info.abbrev())
		return cls(info, overview)
	
	@classmethod
	def from_files(cls, show_path: str, stat_path: str) -> "CommitView":
		return cls.from_output(read_lines(show_path), read_lines(stat_path))
	
	def diagnostics(self) -> List[ParseDiagnostic]:
		return self.commit_info.all_diagnostics() + self.commit_overview.diagnostics
	
	def render(self) -> RenderModel:
		with timed("commit_view.project", oid=self.commit_info.abbrev()):
			return project_commit(self.commit_info, self.commit_overview)
	
	def _decorate(self, model: RenderModel) -> None:
		for line, name in sorted(model.markers.items()):
			self.host.place_marker(line, name)
		for hl in model.highlights:
			self.host.add_highlight(hl.line, hl.start, hl.end, hl.name)
	
	def open(self, host: DisplayHost) -> None:
		"""Render into ``host``; does nothing if the view is already open.
		
		Raises:
			ProjectionError: If the commit cannot be rendered; the view stays closed
		"""
		if self.is_open:
			return
		model = self.render()
		host.create(model.lines, mappings={"q": self.close})
		self.host = host
		self.is_open = True
		self._decorate(model)
		logger.info(f"Opened commit view for {self.commit_info.abbrev()}")
	
	def refresh(self) -> None:
		"""Re-project and replace the host's content."""
		if not self.is_open:
			return
		model = self.render()
		self.host.replace_content(model.lines)
		self._decorate(model)
	
	def close(self) -> None:
		if not self.is_open:
			return
		self.is_open = False
		host, self.host = self.host, None
		host.close()
		logger.info(f"Closed commit view for {self.commit_info.abbrev()}")


def log_diagnostics(diagnostics: Sequence[ParseDiagnostic]) -> None:
	for d in diagnostics:
		logger.warning(f"{d.code} {d.field} at line {d.line_index}: {d.message} ({d.line!r})")


def main(argv: Optional[Sequence[str]] = None) -> int:
	"""CLI entry point for the commit view."""
	import argparse
	
	parser = argparse.ArgumentParser(
		description="Commit View - render git show output with markers and highlights",
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  git show --format=fuller HEAD > show.txt && git show --stat --oneline HEAD > stat.txt
  commit-view --show show.txt --stat stat.txt
  git show --stat --oneline HEAD | commit-view --show show.txt --stat - --json
		"""
	)
	parser.add_argument("--show", required=True, help="File with 'git show --format=fuller' output ('-' for stdin)")
	parser.add_argument("--stat", required=True, help="File with 'git show --stat --oneline' output ('-' for stdin)")
	parser.add_argument("--json", action="store_true", help="Print the render model as JSON")
	parser.add_argument("--no-gutter", action="store_true", help="Do not draw marker signs")
	parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
	
	args = parser.parse_args(argv)
	
	# Set up logging
	log_level = logging.DEBUG if args.verbose else logging.INFO
	logging.basicConfig(
		level=log_level,
		format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
	)
	
	# Suppress per-module chatter unless in debug mode
	if not args.verbose:
		logging.getLogger("utils.commit_parser").setLevel(logging.WARNING)
		logging.getLogger("utils.commit_projector").setLevel(logging.WARNING)
	
	if args.show == "-" and args.stat == "-":
		print("Error: only one of --show/--stat can read stdin", file=sys.stderr)
		return 1
	
	view = None
	try:
		view = CommitView.from_files(args.show, args.stat)
		log_diagnostics(view.diagnostics())
		if args.json:
			print(json.dumps(view.render().model_dump(), indent=2))
			return 0
		host = ConsoleHost(gutter=False if args.no_gutter else None)
		view.open(host)
		host.flush()
		return 0
	
	except CommitParseError as e:
		print(f"Error: {e}", file=sys.stderr)
		return 1
	
	except (ProjectionError, HostError) as e:
		print(f"Error: {e} [{e.code}]", file=sys.stderr)
		return 1
	
	except OSError as e:
		print(f"Error: cannot read input: {e}", file=sys.stderr)
		return 1
	
	except KeyboardInterrupt:
		print("\nOperation cancelled by user", file=sys.stderr)
		return 1
	
	finally:
		if view:
			view.close()


if __name__ == "__main__":
	sys.exit(main())
