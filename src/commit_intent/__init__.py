"""commit-intent: classify commits by semantic intent.

Parses conventional commits, classifies the ones that aren't through a
heuristic/AST/AI cascade, and reduces the results into release decisions.
"""

from __future__ import annotations

import logging

from commit_intent.analysis import CommitAnalyzer, CommitClassification, CommitInfo
from commit_intent.config import AnalyzerConfig, CommitFilter, load_config
from commit_intent.core import (
    CommitType,
    ParsedCommit,
    ReleaseType,
    categorize,
    determine_release_type,
    filter_commits,
    format_commit,
    parse_commit,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AnalyzerConfig",
    "CommitAnalyzer",
    "CommitClassification",
    "CommitFilter",
    "CommitInfo",
    "CommitType",
    "ParsedCommit",
    "ReleaseType",
    "__version__",
    "categorize",
    "determine_release_type",
    "filter_commits",
    "format_commit",
    "load_config",
    "parse_commit",
]
