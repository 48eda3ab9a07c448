"""Release type detection and changelog categorization.

Reduces a collection of parsed commits into the version bump they require
and into type-grouped buckets for changelog rendering.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from commit_intent.core.types import CommitType, ReleaseType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from commit_intent.core.commits import ParsedCommit


@dataclass
class CategorizedChanges:
    """Commits grouped by changelog section.

    A breaking commit appears both in `breaking` and in its type bucket.
    """

    features: list[ParsedCommit] = field(default_factory=list)
    fixes: list[ParsedCommit] = field(default_factory=list)
    performance: list[ParsedCommit] = field(default_factory=list)
    documentation: list[ParsedCommit] = field(default_factory=list)
    refactoring: list[ParsedCommit] = field(default_factory=list)
    breaking: list[ParsedCommit] = field(default_factory=list)
    other: list[ParsedCommit] = field(default_factory=list)
    all: list[ParsedCommit] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.all)

    @property
    def has_breaking_changes(self) -> bool:
        return bool(self.breaking)

    @property
    def total_count(self) -> int:
        return len(self.all)

    def determine_release_type(self) -> ReleaseType:
        """Determine the release type from the grouped buckets."""
        if self.breaking:
            return ReleaseType.MAJOR
        if self.features:
            return ReleaseType.MINOR
        if self.fixes or self.performance or self.all:
            return ReleaseType.PATCH
        return ReleaseType.NONE


def determine_release_type(commits: Iterable[ParsedCommit]) -> ReleaseType:
    """Determine the version bump required by a set of commits.

    Rules:
    - Any breaking change -> MAJOR
    - Any feat -> MINOR
    - Any fix or perf -> PATCH
    - Any other commit at all -> PATCH
    - No commits -> NONE

    Args:
        commits: Parsed commits to evaluate

    Returns:
        The required release type
    """
    has_feature = False
    has_fix = False
    seen_any = False

    for commit in commits:
        seen_any = True
        if commit.is_breaking:
            return ReleaseType.MAJOR
        if commit.commit_type == CommitType.FEAT:
            has_feature = True
        elif commit.commit_type in (CommitType.FIX, CommitType.PERF):
            has_fix = True

    if has_feature:
        return ReleaseType.MINOR
    if has_fix or seen_any:
        return ReleaseType.PATCH
    return ReleaseType.NONE


_BUCKETS = {
    CommitType.FEAT: "features",
    CommitType.FIX: "fixes",
    CommitType.PERF: "performance",
    CommitType.DOCS: "documentation",
    CommitType.REFACTOR: "refactoring",
}


def categorize(commits: Iterable[ParsedCommit]) -> CategorizedChanges:
    """Group commits by type for changelog generation.

    Args:
        commits: Parsed commits in changelog order

    Returns:
        CategorizedChanges with every commit in `all`, in input order
    """
    changes = CategorizedChanges()

    for commit in commits:
        changes.all.append(commit)
        if commit.is_breaking:
            changes.breaking.append(commit)
        bucket = _BUCKETS.get(commit.commit_type, "other")
        getattr(changes, bucket).append(commit)

    return changes


def release_type_priority(release_type: ReleaseType) -> int:
    """Return the ordering weight of a release type (MAJOR=3 ... NONE=0)."""
    return release_type.priority


def max_release_type(*release_types: ReleaseType) -> ReleaseType:
    """Return the highest-priority release type, NONE when given nothing."""
    return max(release_types, key=release_type_priority, default=ReleaseType.NONE)
