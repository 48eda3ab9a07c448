"""Commit classification cascade.

A commit is classified by the cheapest method that is confident enough:

1. Conventional - the message already follows the conventional format
2. Heuristic    - keyword and path rules (injected collaborator)
3. AST          - per-language comparison of changed files
4. AI           - language model classification (injected collaborator)

Each stage runs only while no earlier stage reached min_confidence. If none
does, the most confident result seen wins, earlier stages winning ties.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from commit_intent.analysis.models import (
    AnalysisResult,
    ASTAnalysis,
    ClassifyMethod,
    CommitClassification,
)
from commit_intent.config.models import AnalyzerConfig, ParseConfig
from commit_intent.core.commits import parse_commit
from commit_intent.core.types import CommitType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from commit_intent.analysis.models import CommitInfo
    from commit_intent.analysis.protocols import AIClassifier, ASTAnalyzer, HeuristicsAnalyzer

logger = logging.getLogger(__name__)

# The conventional stage only needs the subject grammar
_CONVENTIONAL_PROBE = ParseConfig(strict_mode=False, parse_references=False)

LANGUAGE_EXTENSIONS = {
    ".go": "go",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "typescript",
    ".jsx": "typescript",
    ".py": "python",
}


def detect_language(path: str) -> str:
    """Map a file path to an AST language tag, or "" if unsupported."""
    return LANGUAGE_EXTENSIONS.get(PurePosixPath(path).suffix.lower(), "")


def merge_ast_analyses(analyses: Iterable[ASTAnalysis]) -> ASTAnalysis | None:
    """Combine per-file analyses into one commit-level analysis.

    Symbol lists and breaking reasons are concatenated in file order.
    The suggested type comes from the most confident file; the first file
    wins ties. Returns None when there is nothing to merge.
    """
    merged: ASTAnalysis | None = None

    for analysis in analyses:
        if merged is None:
            merged = ASTAnalysis()
        merged.added_exports.extend(analysis.added_exports)
        merged.removed_exports.extend(analysis.removed_exports)
        merged.modified_exports.extend(analysis.modified_exports)
        merged.breaking_reasons.extend(analysis.breaking_reasons)
        merged.is_breaking = merged.is_breaking or analysis.is_breaking
        if analysis.confidence > merged.confidence:
            merged.confidence = analysis.confidence
            merged.suggested_type = analysis.suggested_type

    return merged


def build_ast_reasoning(analysis: ASTAnalysis) -> str:
    parts = []
    if analysis.added_exports:
        parts.append(f"added exports: {', '.join(analysis.added_exports)}")
    if analysis.removed_exports:
        parts.append(f"removed exports: {', '.join(analysis.removed_exports)}")
    if analysis.modified_exports:
        parts.append(f"modified exports: {', '.join(analysis.modified_exports)}")
    return "; ".join(parts) if parts else "no public API changes detected"


def ast_to_classification(commit_hash: str, analysis: ASTAnalysis) -> CommitClassification:
    return CommitClassification(
        commit_hash=commit_hash,
        commit_type=analysis.suggested_type or CommitType.REFACTOR,
        confidence=analysis.confidence,
        method=ClassifyMethod.AST,
        reasoning=build_ast_reasoning(analysis),
        is_breaking=analysis.is_breaking,
        breaking_reason="; ".join(analysis.breaking_reasons),
    )


def _prefer(best: CommitClassification | None, candidate: CommitClassification) -> CommitClassification:
    if best is None or candidate.confidence > best.confidence:
        return candidate
    return best


class CommitAnalyzer:
    """Orchestrates conventional, heuristic, AST and AI classification.

    Every collaborator is optional; a stage without one is skipped.

    Usage:
        analyzer = CommitAnalyzer(
            AnalyzerConfig(min_confidence=0.8),
            heuristics=keyword_rules,
            ast_analyzers={"python": python_analyzer},
            ai_classifier=ResilientAIClassifier(CompletionClassifier(service)),
        )
        classification = await analyzer.analyze(commit)
    """

    def __init__(
        self,
        config: AnalyzerConfig | None = None,
        *,
        heuristics: HeuristicsAnalyzer | None = None,
        ast_analyzers: Mapping[str, ASTAnalyzer] | None = None,
        ai_classifier: AIClassifier | None = None,
    ) -> None:
        self.config = config or AnalyzerConfig()
        self.heuristics = heuristics
        self.ast_analyzers = dict(ast_analyzers or {})
        self.ai_classifier = ai_classifier
        self._languages = frozenset(lang.lower() for lang in self.config.languages)

    async def analyze(self, commit: CommitInfo) -> CommitClassification:
        """Classify a single commit.

        AST and AI failures are logged and absorbed. Errors raised by the
        heuristics analyzer propagate.
        """
        conventional = self._classify_conventional(commit)
        if conventional is not None:
            return conventional

        best: CommitClassification | None = None

        if self.config.enable_heuristics and self.heuristics is not None:
            result = self.heuristics.classify(commit)
            if result is not None:
                if result.method == ClassifyMethod.SKIPPED or self._is_confident(result):
                    return result
                best = _prefer(best, result)

        if self.config.enable_ast:
            result = await self._classify_with_ast(commit)
            if result is not None:
                if self._is_confident(result):
                    return result
                best = _prefer(best, result)

        if self.config.enable_ai and self.ai_classifier is not None:
            result = await self._classify_with_ai(commit)
            if result is not None:
                if result.method == ClassifyMethod.SKIPPED or self._is_confident(result):
                    return result
                best = _prefer(best, result)

        if best is not None:
            return best

        return CommitClassification(
            commit_hash=commit.hash,
            confidence=0.0,
            method=ClassifyMethod.HEURISTIC,
            reasoning="unable to classify commit",
        )

    async def analyze_all(
        self,
        commits: Iterable[CommitInfo],
        *,
        result: AnalysisResult | None = None,
    ) -> AnalysisResult:
        """Classify a batch of commits.

        Args:
            commits: Commits to classify
            result: Accumulator to fold into. If the call is cancelled, it
                still receives every classification that had completed.

        Returns:
            The populated AnalysisResult
        """
        commits = list(commits)
        result = result if result is not None else AnalysisResult()
        completed: list[CommitClassification | None] = [None] * len(commits)

        try:
            if self.config.max_concurrency <= 1 or len(commits) <= 1:
                for index, commit in enumerate(commits):
                    completed[index] = await self.analyze(commit)
            else:
                await self._analyze_concurrently(commits, completed)
        finally:
            # Fold in input order so low-confidence hashes keep commit order
            for commit, classification in zip(commits, completed, strict=True):
                if classification is not None:
                    result.record(commit.hash, classification, self.config.min_confidence)

        logger.debug(
            "Classified %d commits (%d low confidence, average %.2f)",
            result.stats.total_commits,
            result.stats.low_confidence_count,
            result.stats.average_confidence,
        )
        return result

    async def _analyze_concurrently(
        self,
        commits: list[CommitInfo],
        completed: list[CommitClassification | None],
    ) -> None:
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def run(index: int, commit: CommitInfo) -> None:
            async with semaphore:
                completed[index] = await self.analyze(commit)

        tasks = [asyncio.create_task(run(index, commit)) for index, commit in enumerate(commits)]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    def _is_confident(self, classification: CommitClassification) -> bool:
        return classification.is_high_confidence(self.config.min_confidence)

    def _classify_conventional(self, commit: CommitInfo) -> CommitClassification | None:
        if not commit.message:
            return None

        parsed = parse_commit(commit.message, _CONVENTIONAL_PROBE)
        if not parsed.is_conventional:
            return None

        return CommitClassification(
            commit_hash=commit.hash,
            commit_type=parsed.commit_type,
            scope=parsed.scope or "",
            confidence=1.0,
            method=ClassifyMethod.CONVENTIONAL,
            reasoning="conventional commit",
            is_breaking=parsed.is_breaking,
            breaking_reason=parsed.breaking_description,
        )

    async def _classify_with_ast(self, commit: CommitInfo) -> CommitClassification | None:
        if not commit.file_diffs or not self.ast_analyzers:
            return None

        analyses = []
        for file_diff in commit.file_diffs:
            language = detect_language(file_diff.path)
            if not language or language not in self._languages:
                continue
            analyzer = self.ast_analyzers.get(language)
            if analyzer is None or not analyzer.supports_file(file_diff.path):
                continue

            try:
                analysis = await analyzer.analyze(file_diff.before, file_diff.after, file_diff.path)
            except Exception as e:
                logger.debug("AST analysis failed for %s in %s: %s", file_diff.path, commit.hash, e)
                continue
            if analysis is not None:
                analyses.append(analysis)

        merged = merge_ast_analyses(analyses)
        if merged is None:
            return None
        return ast_to_classification(commit.hash, merged)

    async def _classify_with_ai(self, commit: CommitInfo) -> CommitClassification | None:
        try:
            return await self.ai_classifier.classify(commit)
        except Exception as e:
            logger.debug("AI classification failed for %s: %s", commit.hash, e)
            return None
