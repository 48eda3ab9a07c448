"""Configuration management for commit-intent."""

from __future__ import annotations

from commit_intent.config.loader import load_config
from commit_intent.config.models import (
    AnalyzerConfig,
    CommitFilter,
    CommitIntentConfig,
    ParseConfig,
    ResilienceConfig,
)

__all__ = [
    "AnalyzerConfig",
    "CommitFilter",
    "CommitIntentConfig",
    "ParseConfig",
    "ResilienceConfig",
    "load_config",
]
