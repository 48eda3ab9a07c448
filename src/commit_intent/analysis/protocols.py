"""Pluggable collaborators consumed by the commit analyzer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from commit_intent.analysis.models import ASTAnalysis, CommitClassification, CommitInfo


@runtime_checkable
class HeuristicsAnalyzer(Protocol):
    """Fast rule-based classification. Must not block."""

    def classify(self, commit: CommitInfo) -> CommitClassification | None: ...


@runtime_checkable
class ASTAnalyzer(Protocol):
    """Language-specific comparison of a file before and after a change."""

    def supports_file(self, path: str) -> bool: ...

    async def analyze(self, before: bytes, after: bytes, path: str) -> ASTAnalysis | None: ...


@runtime_checkable
class AIClassifier(Protocol):
    """Classification backed by a language model."""

    async def classify(self, commit: CommitInfo) -> CommitClassification | None: ...


@runtime_checkable
class CompletionService(Protocol):
    """A text completion backend."""

    def is_available(self) -> bool: ...

    async def complete(self, system_prompt: str, user_prompt: str) -> str: ...
