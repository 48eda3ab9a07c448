"""Exception hierarchy for commit-intent.

All errors raised by the package derive from CommitIntentError so callers
can catch everything with a single except clause.
"""

from __future__ import annotations


class CommitIntentError(Exception):
    """Base class for all commit-intent errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(CommitIntentError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml was found."""


class ConfigValidationError(ConfigError):
    """Configuration values failed validation."""


# =============================================================================
# Parsing
# =============================================================================


class CommitValidationError(CommitIntentError):
    """Commit message does not follow the conventional commit format.

    Only raised when strict parsing is requested.
    """

    def __init__(self, message: str, *, subject: str = "") -> None:
        super().__init__(message)
        self.subject = subject


# =============================================================================
# Classification
# =============================================================================


class ClassificationError(CommitIntentError):
    """A classification stage failed."""


class AIClassificationError(ClassificationError):
    """The AI classifier could not produce a classification."""


class RateLimitExceededError(ClassificationError):
    """The rate limiter refused to admit a call."""

    def __init__(self, message: str, *, retry_after: float = 0.0) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class CircuitOpenError(ClassificationError):
    """The circuit breaker is open and fails calls fast."""

    def __init__(self, name: str, retry_after: float) -> None:
        super().__init__(f"Circuit breaker open for {name}. Retry after {retry_after:.1f} seconds.")
        self.name = name
        self.retry_after = retry_after
