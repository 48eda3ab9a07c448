"""Tests for commit filtering."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from commit_intent.config.models import CommitFilter
from commit_intent.core.commits import Commit, ParsedCommit, parse_commit, parse_commits
from commit_intent.core.filters import CompiledFilter, as_utc, filter_commits
from commit_intent.core.types import CommitType


@pytest.fixture
def parsed_sample(sample_commits: list[Commit]) -> list[ParsedCommit]:
    return parse_commits(sample_commits)


def shas(commits: list[ParsedCommit]) -> list[str]:
    return [c.sha for c in commits]


def dated(sha: str, date: datetime) -> ParsedCommit:
    return ParsedCommit.from_commit(Commit(sha, "fix: something", "Eve", "eve@example.com", date))


class TestFilterCommits:
    """Tests for filter_commits()."""

    def test_default_filter_drops_non_conventional(self, parsed_sample: list[ParsedCommit]):
        """By default only conventional commits pass."""
        result = filter_commits(parsed_sample, CommitFilter())

        assert shas(result) == ["feat123", "fix456", "docs001", "chore01", "break789"]

    def test_include_non_conventional(self, parsed_sample: list[ParsedCommit]):
        result = filter_commits(parsed_sample, CommitFilter(include_non_conventional=True))

        assert shas(result) == shas(parsed_sample)

    def test_filter_by_types(self, parsed_sample: list[ParsedCommit]):
        result = filter_commits(parsed_sample, CommitFilter(types=[CommitType.FEAT, CommitType.DOCS]))

        assert shas(result) == ["feat123", "docs001", "break789"]

    def test_types_accept_strings(self, parsed_sample: list[ParsedCommit]):
        """Types given as plain strings are validated into CommitType."""
        result = filter_commits(parsed_sample, CommitFilter(types=["fix"]))

        assert shas(result) == ["fix456"]

    def test_filter_by_authors(self, parsed_sample: list[ParsedCommit]):
        result = filter_commits(parsed_sample, CommitFilter(authors=["alice@example.com"]))

        assert shas(result) == ["feat123", "break789"]

    def test_exclude_authors(self, parsed_sample: list[ParsedCommit]):
        result = filter_commits(parsed_sample, CommitFilter(exclude_authors=["bot@example.com"]))

        assert "chore01" not in shas(result)
        assert len(result) == 4

    def test_filter_by_scopes(self, parsed_sample: list[ParsedCommit]):
        result = filter_commits(parsed_sample, CommitFilter(scopes=["core", "api"]))

        assert shas(result) == ["fix456", "break789"]

    def test_exclude_scopes(self, parsed_sample: list[ParsedCommit]):
        result = filter_commits(parsed_sample, CommitFilter(exclude_scopes=["deps"]))

        assert shas(result) == ["feat123", "fix456", "docs001", "break789"]

    def test_only_breaking(self, parsed_sample: list[ParsedCommit]):
        result = filter_commits(parsed_sample, CommitFilter(only_breaking=True))

        assert shas(result) == ["break789"]

    def test_date_range_is_inclusive(self, parsed_sample: list[ParsedCommit]):
        criteria = CommitFilter(since=datetime(2024, 3, 5, 9, 30), until=datetime(2024, 3, 7))
        result = filter_commits(parsed_sample, criteria)

        assert shas(result) == ["fix456", "docs001", "chore01"]

    def test_predicates_are_anded(self, parsed_sample: list[ParsedCommit]):
        """All active predicates must hold."""
        criteria = CommitFilter(
            types=[CommitType.FEAT],
            authors=["alice@example.com"],
            since=datetime(2024, 3, 2),
        )
        result = filter_commits(parsed_sample, criteria)

        assert shas(result) == ["break789"]

    def test_date_bound_excludes_commits_without_date(self):
        """Commits without metadata fail an active date bound."""
        criteria = CommitFilter(since=datetime(2024, 1, 1))

        assert filter_commits([parse_commit("fix: a")], criteria) == []

    def test_no_predicates_keep_commits_without_metadata(self):
        commits = [parse_commit("fix: a"), parse_commit("feat(ui): b")]

        assert filter_commits(commits, CommitFilter()) == commits

    def test_result_matches_brute_force(self, parsed_sample: list[ParsedCommit]):
        """The filter result is exactly the subset satisfying every predicate."""
        criteria = CommitFilter(
            exclude_authors=["bob@example.com"],
            exclude_scopes=["deps"],
            include_non_conventional=True,
        )
        expected = [
            c
            for c in parsed_sample
            if c.author_email != "bob@example.com" and c.scope != "deps"
        ]

        assert filter_commits(parsed_sample, criteria) == expected


class TestCompiledFilter:
    """Tests for CompiledFilter.compile()."""

    def test_empty_allow_lists_are_inactive(self):
        compiled = CompiledFilter.compile(CommitFilter())

        assert compiled.types is None
        assert compiled.authors is None
        assert compiled.scopes is None
        assert compiled.exclude_authors == frozenset()

    def test_lists_become_sets(self):
        compiled = CompiledFilter.compile(CommitFilter(authors=["a@x", "a@x", "b@x"]))

        assert compiled.authors == frozenset({"a@x", "b@x"})


class TestCommitFilterValidation:
    def test_since_after_until_rejected(self):
        with pytest.raises(ValidationError):
            CommitFilter(since=datetime(2024, 2, 1), until=datetime(2024, 1, 1))

    def test_unknown_option_rejected(self):
        with pytest.raises(ValidationError):
            CommitFilter(only_features=True)


class TestTimezoneMixing:
    """Naive and aware datetimes are compared in UTC."""

    def test_aware_bound_naive_commit(self):
        """An ISO bound with a Z suffix works against naive commit dates."""
        commits = [dated("old", datetime(2024, 2, 20)), dated("new", datetime(2024, 3, 5))]
        criteria = CommitFilter.model_validate({"since": "2024-03-01T00:00:00Z"})

        assert [c.sha for c in filter_commits(commits, criteria)] == ["new"]

    def test_naive_bound_aware_commit(self):
        commits = [
            dated("early", datetime(2024, 3, 1, 8, 0, tzinfo=UTC)),
            dated("late", datetime(2024, 3, 1, 12, 0, tzinfo=UTC)),
        ]
        criteria = CommitFilter(until=datetime(2024, 3, 1, 10, 0))

        assert [c.sha for c in filter_commits(commits, criteria)] == ["early"]

    def test_offsets_are_normalized(self):
        """10:00+02:00 is 08:00 UTC, so it falls before a 09:00 UTC bound."""
        plus_two = timezone(timedelta(hours=2))
        commits = [dated("c", datetime(2024, 3, 1, 10, 0, tzinfo=plus_two))]

        assert filter_commits(commits, CommitFilter(since=datetime(2024, 3, 1, 9, 0))) == []
        assert filter_commits(commits, CommitFilter(until=datetime(2024, 3, 1, 9, 0))) == commits

    def test_mixed_range_validation(self):
        with pytest.raises(ValidationError):
            CommitFilter.model_validate({"since": "2024-03-02T00:00:00Z", "until": datetime(2024, 3, 1)})

    def test_as_utc(self):
        assert as_utc(None) is None
        assert as_utc(datetime(2024, 1, 1)) == datetime(2024, 1, 1, tzinfo=UTC)
        assert as_utc(datetime(2024, 1, 1, 2, tzinfo=timezone(timedelta(hours=2)))).hour == 0
