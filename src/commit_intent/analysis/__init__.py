"""Commit classification.

Classifies commits that may not follow the conventional format by
escalating through heuristic, AST and AI analysis.
"""

from __future__ import annotations

from commit_intent.analysis.ai import CompletionClassifier, parse_ai_response
from commit_intent.analysis.analyzer import CommitAnalyzer, detect_language, merge_ast_analyses
from commit_intent.analysis.models import (
    AnalysisResult,
    AnalysisStats,
    ASTAnalysis,
    ClassifyMethod,
    CommitClassification,
    CommitInfo,
    DiffStats,
    FileDiff,
)
from commit_intent.analysis.protocols import (
    AIClassifier,
    ASTAnalyzer,
    CompletionService,
    HeuristicsAnalyzer,
)
from commit_intent.analysis.resilience import (
    CircuitBreaker,
    CircuitState,
    Resilience,
    ResilientAIClassifier,
    TokenBucketRateLimiter,
    retry_with_backoff,
)

__all__ = [
    "AIClassifier",
    "ASTAnalysis",
    "ASTAnalyzer",
    "AnalysisResult",
    "AnalysisStats",
    "CircuitBreaker",
    "CircuitState",
    "ClassifyMethod",
    "CommitAnalyzer",
    "CommitClassification",
    "CommitInfo",
    "CompletionClassifier",
    "CompletionService",
    "DiffStats",
    "FileDiff",
    "HeuristicsAnalyzer",
    "Resilience",
    "ResilientAIClassifier",
    "TokenBucketRateLimiter",
    "detect_language",
    "merge_ast_analyses",
    "parse_ai_response",
    "retry_with_backoff",
]
