"""Core business logic for commit-intent.

This module contains the collaborator-free building blocks:
- Conventional commit parsing and formatting
- Release type detection and changelog categorization
- Commit filtering
"""

from __future__ import annotations

from commit_intent.core.commits import (
    Commit,
    ParsedCommit,
    Reference,
    format_commit,
    parse_commit,
    parse_commits,
)
from commit_intent.core.filters import CompiledFilter, filter_commits
from commit_intent.core.release import (
    CategorizedChanges,
    categorize,
    determine_release_type,
    max_release_type,
    release_type_priority,
)
from commit_intent.core.types import CommitType, ReleaseType

__all__ = [
    # Commits
    "CategorizedChanges",
    "Commit",
    "CommitType",
    "CompiledFilter",
    "ParsedCommit",
    "Reference",
    # Release
    "ReleaseType",
    "categorize",
    "determine_release_type",
    "filter_commits",
    "format_commit",
    "max_release_type",
    "parse_commit",
    "parse_commits",
    "release_type_priority",
]
