"""Tests for the commit type, release type and classification method vocabularies."""

from __future__ import annotations

import pytest

from commit_intent.analysis.models import ClassifyMethod
from commit_intent.core.types import CONVENTIONAL_TYPES, CommitType, ReleaseType


class TestCommitType:
    """Tests for CommitType."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("feat", CommitType.FEAT),
            (" Fix ", CommitType.FIX),
            ("REVERT", CommitType.REVERT),
            ("feature", CommitType.UNKNOWN),
            ("", CommitType.UNKNOWN),
            (None, CommitType.UNKNOWN),
        ],
    )
    def test_parse(self, text: str | None, expected: CommitType):
        assert CommitType.parse(text) == expected

    @pytest.mark.parametrize(
        ("commit_type", "category"),
        [
            (CommitType.FEAT, "Features"),
            (CommitType.FIX, "Bug Fixes"),
            (CommitType.PERF, "Performance Improvements"),
            (CommitType.DOCS, "Documentation"),
            (CommitType.REFACTOR, "Code Refactoring"),
            (CommitType.CHORE, "Chores"),
            (CommitType.REVERT, "Reverts"),
            (CommitType.UNKNOWN, "Other Changes"),
        ],
    )
    def test_changelog_category(self, commit_type: CommitType, category: str):
        assert commit_type.changelog_category == category

    def test_every_type_has_description_and_category(self):
        for commit_type in CommitType:
            assert commit_type.description
            assert commit_type.changelog_category

    def test_descriptions(self):
        assert CommitType.FEAT.description == "A new feature"
        assert CommitType.FIX.description == "A bug fix"
        assert CommitType.UNKNOWN.description == "Unknown commit type"

    def test_affects_changelog(self):
        """Only user-facing types show up in a changelog by default."""
        affecting = {t for t in CommitType if t.affects_changelog}

        assert affecting == {CommitType.FEAT, CommitType.FIX, CommitType.PERF, CommitType.REVERT}

    def test_conventional_types_exclude_unknown(self):
        assert CommitType.UNKNOWN not in CONVENTIONAL_TYPES
        assert len(CONVENTIONAL_TYPES) == 11


class TestReleaseType:
    def test_ordering(self):
        ordered = sorted(ReleaseType, key=lambda t: t.priority, reverse=True)

        assert ordered == [ReleaseType.MAJOR, ReleaseType.MINOR, ReleaseType.PATCH, ReleaseType.NONE]


class TestClassifyMethod:
    """Tests for ClassifyMethod abbreviations."""

    @pytest.mark.parametrize(
        ("method", "short"),
        [
            (ClassifyMethod.CONVENTIONAL, "conv"),
            (ClassifyMethod.HEURISTIC, "heur"),
            (ClassifyMethod.AST, "ast"),
            (ClassifyMethod.AI, "ai"),
            (ClassifyMethod.MANUAL, "man"),
            (ClassifyMethod.SKIPPED, "skip"),
        ],
    )
    def test_short(self, method: ClassifyMethod, short: str):
        assert method.short == short
