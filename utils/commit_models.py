#!/usr/bin/env python3
"""Pydantic models for parsed commit data.

This module defines the records produced from ``git show --format=fuller``
and ``git show --stat --oneline`` output: the full commit header with its
per-file diffs, and the diffstat overview.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from configs.config import Config
from utils.diff_models import Diff, ParseDiagnostic


class CommitOverviewFile(BaseModel):
    """One row of a diffstat table."""
    
    path: str = Field(..., description="Path relative to the repository root")
    changes: int = Field(..., ge=0, description="Total number of changed lines")
    insertions: str = Field("", description="Insertion count visualized as a run of '+'")
    deletions: str = Field("", description="Deletion count visualized as a run of '-'")
    binary: Optional[str] = Field(None, description="Size change of a binary file, e.g. 'Bin 0 -> 1234 bytes'")
    
    model_config = {"extra": "ignore"}
    
    def count_text(self) -> str:
        """Text shown in the count column: the binary size change or the change count."""
        return self.binary if self.binary is not None else str(self.changes)


class CommitOverview(BaseModel):
    """Diffstat summary for one commit."""
    
    summary: str = Field(..., description="Trimmed final line, e.g. '1 file changed, 2 insertions(+)'")
    files: List[CommitOverviewFile] = Field(default_factory=list, description="Rows in source order")
    diagnostics: List[ParseDiagnostic] = Field(default_factory=list, description="Rows that did not parse")
    
    model_config = {"extra": "ignore"}


class CommitInfo(BaseModel):
    """Full metadata and body of one commit."""
    
    oid: str = Field("", description="Full object id")
    merge_parents: List[str] = Field(default_factory=list, description="Parent ids from a 'Merge:' line")
    author_name: str = Field("", description="Name of the author")
    author_email: str = Field("", description="Email of the author")
    author_date: str = Field("", description="When the author committed")
    committer_name: str = Field("", description="Name of the committer")
    committer_email: str = Field("", description="Email of the committer")
    committer_date: str = Field("", description="When the committer committed")
    description: List[str] = Field(default_factory=list, description="Trimmed commit message lines")
    diffs: List[Diff] = Field(default_factory=list, description="One diff per changed file")
    diagnostics: List[ParseDiagnostic] = Field(default_factory=list, description="Fields that did not parse")
    
    model_config = {"extra": "ignore"}
    
    def abbrev(self) -> str:
        """Return the abbreviated object id."""
        return self.oid[: Config.ABBREV_LENGTH]

    def all_diagnostics(self) -> List[ParseDiagnostic]:
        """Header diagnostics followed by those of each diff, in order."""
        collected = list(self.diagnostics)
        for diff in self.diffs:
            collected.extend(diff.diagnostics)
        return collected
