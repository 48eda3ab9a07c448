"""Configuration models for commit-intent.

All models use pydantic so values read from pyproject.toml are validated
before they reach the engine.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from commit_intent.core.filters import as_utc
from commit_intent.core.types import CommitType


class ParseConfig(BaseModel):
    """Conventional commit parsing options."""

    model_config = ConfigDict(extra="forbid")

    strict_mode: bool = Field(
        default=False,
        description="Reject messages that don't follow the conventional commit format",
    )
    parse_references: bool = Field(
        default=True,
        description="Extract issue/PR references such as 'fixes #12'",
    )


class AnalyzerConfig(BaseModel):
    """Classification cascade options."""

    model_config = ConfigDict(extra="forbid")

    min_confidence: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Confidence at which the cascade stops escalating",
    )
    enable_heuristics: bool = True
    enable_ast: bool = True
    enable_ai: bool = True
    languages: list[str] = Field(
        default_factory=lambda: ["go", "typescript", "python"],
        description="Languages the AST stage may analyze",
    )
    custom_keywords: dict[CommitType, list[str]] = Field(
        default_factory=dict,
        description="Extra keywords per commit type, passed to the heuristics analyzer",
    )
    skip_paths: list[str] = Field(
        default_factory=lambda: ["vendor/*", "node_modules/*", "*.generated.go"],
        description="Path globs the heuristics analyzer should ignore",
    )
    max_concurrency: int = Field(
        default=1,
        ge=1,
        description="Commits classified concurrently by analyze_all",
    )


class ResilienceConfig(BaseModel):
    """Rate limiting, circuit breaking and retry around AI calls."""

    model_config = ConfigDict(extra="forbid")

    # Rate limiting (0 disables)
    rate_limit_rpm: int = Field(default=60, ge=0)
    rate_limit_max_wait: float | None = Field(
        default=30.0,
        ge=0.0,
        description="Longest wait for a rate limit token; None waits indefinitely",
    )

    # Retry (0 disables)
    retry_attempts: int = Field(default=3, ge=0)
    retry_initial_wait: float = Field(default=0.5, ge=0.0)
    retry_max_wait: float = Field(default=10.0, ge=0.0)

    # Circuit breaker
    circuit_breaker_enabled: bool = True
    circuit_breaker_threshold: int = Field(default=5, ge=1)
    circuit_breaker_timeout: float = Field(default=30.0, ge=0.0)
    circuit_breaker_max_requests: int = Field(default=3, ge=1)


class CommitFilter(BaseModel):
    """Predicates for selecting parsed commits. Active predicates are ANDed."""

    model_config = ConfigDict(extra="forbid")

    types: list[CommitType] = Field(default_factory=list)
    authors: list[str] = Field(default_factory=list, description="Author emails to keep")
    exclude_authors: list[str] = Field(default_factory=list)
    scopes: list[str] = Field(default_factory=list)
    exclude_scopes: list[str] = Field(default_factory=list)
    include_non_conventional: bool = False
    only_breaking: bool = False
    since: datetime | None = None
    until: datetime | None = None

    @model_validator(mode="after")
    def _check_date_range(self) -> CommitFilter:
        if self.since is not None and self.until is not None and as_utc(self.since) > as_utc(self.until):
            raise ValueError("since must not be later than until")
        return self


class CommitIntentConfig(BaseModel):
    """Root configuration, read from [tool.commit-intent]."""

    model_config = ConfigDict(extra="forbid")

    analysis: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    parsing: ParseConfig = Field(default_factory=ParseConfig)
    resilience: ResilienceConfig = Field(default_factory=ResilienceConfig)
    filter: CommitFilter = Field(default_factory=CommitFilter)
