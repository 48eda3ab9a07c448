"""Shared fixtures for commit-intent tests."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from commit_intent.core.commits import Commit

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def feat_commit() -> Commit:
    return Commit(
        sha="feat123",
        message="feat(auth): add user authentication",
        author_name="Alice",
        author_email="alice@example.com",
        date=datetime(2024, 3, 1, 12, 0),
    )


@pytest.fixture
def fix_commit() -> Commit:
    return Commit(
        sha="fix456",
        message="fix(core): handle empty config file",
        author_name="Bob",
        author_email="bob@example.com",
        date=datetime(2024, 3, 5, 9, 30),
    )


@pytest.fixture
def breaking_commit() -> Commit:
    return Commit(
        sha="break789",
        message="feat(api)!: drop v1 endpoints\n\nBREAKING CHANGE: v1 endpoints are gone",
        author_name="Alice",
        author_email="alice@example.com",
        date=datetime(2024, 3, 10, 16, 45),
    )


@pytest.fixture
def sample_commits(feat_commit: Commit, fix_commit: Commit, breaking_commit: Commit) -> list[Commit]:
    """A realistic mix of commits since the last release."""
    return [
        feat_commit,
        fix_commit,
        Commit("docs001", "docs: update README", "Carol", "carol@example.com", datetime(2024, 3, 6)),
        Commit("chore01", "chore(deps): bump pydantic", "bot", "bot@example.com", datetime(2024, 3, 7)),
        breaking_commit,
        Commit("misc001", "Tweak things before the demo", "Dave", "dave@example.com", datetime(2024, 3, 11)),
    ]


@pytest.fixture
def temp_project_with_pyproject(tmp_path: Path) -> Path:
    """A project directory whose pyproject.toml configures commit-intent."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "1.0.0"

[tool.commit-intent.analysis]
min_confidence = 0.8
enable_ai = false
languages = ["python"]

[tool.commit-intent.parsing]
strict_mode = true

[tool.commit-intent.resilience]
rate_limit_rpm = 30
retry_attempts = 5
"""
    )
    return tmp_path
