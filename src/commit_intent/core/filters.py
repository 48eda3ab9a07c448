"""Predicate-based commit selection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from commit_intent.config.models import CommitFilter
    from commit_intent.core.commits import ParsedCommit


@dataclass(frozen=True)
class CompiledFilter:
    """A CommitFilter with its allow/deny lists turned into sets.

    An allow-list set of None means the predicate is inactive. Date bounds
    are normalized to UTC, with naive datetimes taken as UTC.
    """

    criteria: CommitFilter
    types: frozenset[str] | None
    authors: frozenset[str] | None
    exclude_authors: frozenset[str]
    scopes: frozenset[str] | None
    exclude_scopes: frozenset[str]
    since: datetime | None = None
    until: datetime | None = None

    @classmethod
    def compile(cls, criteria: CommitFilter) -> CompiledFilter:
        return cls(
            criteria=criteria,
            types=frozenset(criteria.types) if criteria.types else None,
            authors=frozenset(criteria.authors) if criteria.authors else None,
            exclude_authors=frozenset(criteria.exclude_authors),
            scopes=frozenset(criteria.scopes) if criteria.scopes else None,
            exclude_scopes=frozenset(criteria.exclude_scopes),
            since=as_utc(criteria.since),
            until=as_utc(criteria.until),
        )

    def matches(self, commit: ParsedCommit) -> bool:
        """Check a commit against every active predicate."""
        if self.types is not None and commit.commit_type not in self.types:
            return False

        author = commit.author_email
        if self.authors is not None and author not in self.authors:
            return False
        if author in self.exclude_authors:
            return False

        scope = commit.scope or ""
        if self.scopes is not None and scope not in self.scopes:
            return False
        if scope in self.exclude_scopes:
            return False

        if not self.criteria.include_non_conventional and not commit.is_conventional:
            return False
        if self.criteria.only_breaking and not commit.is_breaking:
            return False

        if self.since is not None or self.until is not None:
            date = as_utc(commit.date)
            if date is None:
                return False
            if self.since is not None and date < self.since:
                return False
            if self.until is not None and date > self.until:
                return False

        return True


def as_utc(value: datetime | None) -> datetime | None:
    """Convert to an aware UTC datetime, treating naive values as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def filter_commits(commits: Iterable[ParsedCommit], criteria: CommitFilter) -> list[ParsedCommit]:
    """Select the commits that satisfy all active filter predicates.

    Args:
        commits: Parsed commits to filter
        criteria: Filter configuration

    Returns:
        Matching commits in their original order
    """
    compiled = CompiledFilter.compile(criteria)
    return [commit for commit in commits if compiled.matches(commit)]
