"""Value types for commit classification."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum

from commit_intent.core.types import CommitType


class ClassifyMethod(StrEnum):
    """How a commit classification was determined."""

    CONVENTIONAL = "conventional"
    HEURISTIC = "heuristic"
    AST = "ast"
    AI = "ai"
    MANUAL = "manual"
    SKIPPED = "skipped"

    @property
    def short(self) -> str:
        """Abbreviation for compact display."""
        return _SHORT_NAMES[self]


_SHORT_NAMES = {
    ClassifyMethod.CONVENTIONAL: "conv",
    ClassifyMethod.HEURISTIC: "heur",
    ClassifyMethod.AST: "ast",
    ClassifyMethod.AI: "ai",
    ClassifyMethod.MANUAL: "man",
    ClassifyMethod.SKIPPED: "skip",
}


@dataclass(frozen=True)
class FileDiff:
    """Before/after content of one changed file."""

    path: str
    before: bytes = b""
    after: bytes = b""


@dataclass(frozen=True)
class DiffStats:
    files_changed: int = 0
    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True)
class CommitInfo:
    """Everything the classifiers may look at for a single commit.

    The subject defaults to the first line of the message.
    """

    hash: str
    message: str
    subject: str = ""
    files: tuple[str, ...] = ()
    file_diffs: tuple[FileDiff, ...] = ()
    stats: DiffStats = field(default_factory=DiffStats)
    diff: str = ""
    is_merge: bool = False
    parent_count: int = 0

    def __post_init__(self) -> None:
        if not self.subject and self.message:
            object.__setattr__(self, "subject", self.message.strip().split("\n", 1)[0].strip())
        object.__setattr__(self, "files", tuple(self.files))
        object.__setattr__(self, "file_diffs", tuple(self.file_diffs))


@dataclass
class ASTAnalysis:
    """API-surface changes reported by a language analyzer."""

    added_exports: list[str] = field(default_factory=list)
    removed_exports: list[str] = field(default_factory=list)
    modified_exports: list[str] = field(default_factory=list)
    is_breaking: bool = False
    breaking_reasons: list[str] = field(default_factory=list)
    suggested_type: CommitType = CommitType.UNKNOWN
    confidence: float = 0.0


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    if math.isnan(value):
        return low
    return max(low, min(high, value))


@dataclass(frozen=True)
class CommitClassification:
    """The inferred intent of one commit.

    Confidence is clamped to [0, 1] on construction.
    """

    commit_hash: str
    commit_type: CommitType = CommitType.UNKNOWN
    scope: str = ""
    confidence: float = 0.0
    method: ClassifyMethod = ClassifyMethod.HEURISTIC
    reasoning: str = ""
    is_breaking: bool = False
    breaking_reason: str = ""
    should_skip: bool = False
    skip_reason: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", clamp(float(self.confidence)))
        object.__setattr__(self, "commit_type", CommitType(self.commit_type))
        object.__setattr__(self, "method", ClassifyMethod(self.method))

    def is_high_confidence(self, threshold: float) -> bool:
        return self.confidence >= threshold


@dataclass
class AnalysisStats:
    """Aggregate statistics over a batch of classifications."""

    total_commits: int = 0
    method_breakdown: Counter[ClassifyMethod] = field(default_factory=Counter)
    low_confidence_commits: list[str] = field(default_factory=list)
    confidence_sum: float = 0.0

    @property
    def conventional_count(self) -> int:
        return self.method_breakdown[ClassifyMethod.CONVENTIONAL]

    @property
    def heuristic_count(self) -> int:
        return self.method_breakdown[ClassifyMethod.HEURISTIC]

    @property
    def ast_count(self) -> int:
        return self.method_breakdown[ClassifyMethod.AST]

    @property
    def ai_count(self) -> int:
        return self.method_breakdown[ClassifyMethod.AI]

    @property
    def skipped_count(self) -> int:
        return self.method_breakdown[ClassifyMethod.SKIPPED]

    @property
    def low_confidence_count(self) -> int:
        return len(self.low_confidence_commits)

    @property
    def average_confidence(self) -> float:
        if not self.total_commits:
            return 0.0
        return self.confidence_sum / self.total_commits


@dataclass
class AnalysisResult:
    """Classifications for a batch of commits, keyed by commit hash."""

    classifications: dict[str, CommitClassification] = field(default_factory=dict)
    stats: AnalysisStats = field(default_factory=AnalysisStats)

    def record(self, commit_hash: str, classification: CommitClassification, min_confidence: float) -> None:
        """Fold one classification into the result."""
        self.classifications[commit_hash] = classification
        self.stats.total_commits += 1
        self.stats.confidence_sum += classification.confidence
        self.stats.method_breakdown[classification.method] += 1

        if classification.method != ClassifyMethod.SKIPPED and classification.confidence < min_confidence:
            self.stats.low_confidence_commits.append(commit_hash)
