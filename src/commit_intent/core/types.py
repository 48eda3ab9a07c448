"""Commit type and release type vocabularies."""

from __future__ import annotations

from enum import StrEnum


class CommitType(StrEnum):
    """Conventional commit type.

    UNKNOWN (the empty string) marks commits that are not conventional.
    """

    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CHORE = "chore"
    REVERT = "revert"
    UNKNOWN = ""

    @classmethod
    def parse(cls, value: str | None) -> CommitType:
        """Parse a type tag, returning UNKNOWN for anything unrecognized.

        Matching ignores case and surrounding whitespace.
        """
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def changelog_category(self) -> str:
        return _CHANGELOG_CATEGORIES[self]

    @property
    def affects_changelog(self) -> bool:
        return self in {CommitType.FEAT, CommitType.FIX, CommitType.PERF, CommitType.REVERT}


# Types recognised by the conventional commit grammar
CONVENTIONAL_TYPES: tuple[CommitType, ...] = tuple(t for t in CommitType if t is not CommitType.UNKNOWN)

_DESCRIPTIONS = {
    CommitType.FEAT: "A new feature",
    CommitType.FIX: "A bug fix",
    CommitType.DOCS: "Documentation only changes",
    CommitType.STYLE: "Changes that do not affect the meaning of the code",
    CommitType.REFACTOR: "A code change that neither fixes a bug nor adds a feature",
    CommitType.PERF: "A code change that improves performance",
    CommitType.TEST: "Adding missing tests or correcting existing tests",
    CommitType.BUILD: "Changes that affect the build system or external dependencies",
    CommitType.CI: "Changes to CI configuration files and scripts",
    CommitType.CHORE: "Other changes that don't modify src or test files",
    CommitType.REVERT: "Reverts a previous commit",
    CommitType.UNKNOWN: "Unknown commit type",
}

_CHANGELOG_CATEGORIES = {
    CommitType.FEAT: "Features",
    CommitType.FIX: "Bug Fixes",
    CommitType.PERF: "Performance Improvements",
    CommitType.DOCS: "Documentation",
    CommitType.REFACTOR: "Code Refactoring",
    CommitType.STYLE: "Styles",
    CommitType.TEST: "Tests",
    CommitType.BUILD: "Build System",
    CommitType.CI: "Continuous Integration",
    CommitType.CHORE: "Chores",
    CommitType.REVERT: "Reverts",
    CommitType.UNKNOWN: "Other Changes",
}


class ReleaseType(StrEnum):
    """Semantic version bump required by a set of changes."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"

    @property
    def priority(self) -> int:
        return _PRIORITIES[self]


_PRIORITIES = {
    ReleaseType.MAJOR: 3,
    ReleaseType.MINOR: 2,
    ReleaseType.PATCH: 1,
    ReleaseType.NONE: 0,
}
