"""Shared pytest fixtures for commit view tests."""

from typing import List

import pytest

from configs.config import Config

OID = "3f2a9c1d4e5b6a7980c1d2e3f4a5b6c7d8e9f012"

SHOW_OUTPUT = [
    f"commit {OID}",
    "Author:     Jane Doe <jane@example.com>",
    "AuthorDate: Tue Oct 13 10:00:00 2026 +0200",
    "Commit:     John Roe <john@example.com>",
    "CommitDate: Wed Oct 14 11:30:00 2026 +0200",
    "",
    "    Fix parser crash on empty input",
    "    ",
    "    Details about the fix.",
    "",
    "diff --git a/src/foo.lua b/src/foo.lua",
    "index 1111111..2222222 100644",
    "--- a/src/foo.lua",
    "+++ b/src/foo.lua",
    "@@ -1,3 +1,4 @@",
    " local M = {}",
    "-local x = 1",
    "+local x = 2",
    "+local y = 3",
    " return M",
    "@@ -10,2 +11,2 @@ function M.run()",
    "-  old()",
    "+  new()",
    "diff --git a/docs/new.md b/docs/new.md",
    "new file mode 100644",
    "index 0000000..3333333",
    "--- /dev/null",
    "+++ b/docs/new.md",
    "@@ -0,0 +1,2 @@",
    "+# Title",
    "+body",
]

STAT_OUTPUT = [
    "3f2a9c1 Fix parser crash on empty input",
    " docs/new.md |  2 ++",
    " src/foo.lua |  5 +++--",
    " 2 files changed, 5 insertions(+), 2 deletions(-)",
]


@pytest.fixture
def show_lines() -> List[str]:
    return list(SHOW_OUTPUT)


@pytest.fixture
def stat_lines() -> List[str]:
    return list(STAT_OUTPUT)


@pytest.fixture(autouse=True)
def default_config(monkeypatch, tmp_path):
    """Pin config to defaults so the host environment cannot leak in."""
    monkeypatch.setattr(Config, "ABBREV_LENGTH", 7)
    monkeypatch.setattr(Config, "REMOTE_PLACEHOLDER", "<remote>/<branch>")
    monkeypatch.setattr(Config, "FAIL_ON_MALFORMED", False)
    monkeypatch.setattr(Config, "GUTTER_ENABLED", True)
    monkeypatch.setattr(Config, "METRICS_ENABLED", False)
    monkeypatch.setattr(Config, "METRICS_ROOT", str(tmp_path / "metrics"))
