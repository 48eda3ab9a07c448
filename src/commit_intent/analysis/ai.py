"""AI-backed commit classification.

CompletionClassifier turns a CommitInfo into a prompt, sends it to an
injected CompletionService and normalizes the JSON answer into a
CommitClassification.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, ValidationError

from commit_intent.analysis.models import ClassifyMethod, CommitClassification
from commit_intent.core.types import CommitType
from commit_intent.exceptions import AIClassificationError

if TYPE_CHECKING:
    from commit_intent.analysis.models import CommitInfo
    from commit_intent.analysis.protocols import CompletionService

MAX_DIFF_CHARS = 4000
MAX_REASON_CHARS = 240

SYSTEM_PROMPT = """You are a commit classification engine.
Return JSON only with fields:
{"type":"feat|fix|docs|style|refactor|perf|test|build|ci|chore|revert|",
 "scope":"string",
 "confidence":0.0,
 "reasoning":"string",
 "is_breaking":true|false,
 "breaking_reason":"string",
 "should_skip":true|false,
 "skip_reason":"string"}
Use empty strings if unknown. Confidence must be between 0 and 1."""


class AIResponse(BaseModel):
    """The JSON object a completion is expected to contain."""

    model_config = ConfigDict(extra="ignore")

    type: str = ""
    scope: str = ""
    confidence: float = 0.0
    reasoning: str = ""
    is_breaking: bool = False
    breaking_reason: str = ""
    should_skip: bool = False
    skip_reason: str = ""


def build_user_prompt(commit: CommitInfo) -> str:
    """Describe a commit for the model."""
    lines = [
        "Classify this commit.",
        "",
        f"Hash: {commit.hash[:7]}",
        f"Subject: {commit.subject}",
    ]
    if commit.message and commit.message != commit.subject:
        lines += ["Message:", commit.message]

    if commit.files:
        lines.append("Files:")
        lines += [f"- {path}" for path in commit.files]

    stats = commit.stats
    if stats.files_changed > 0:
        lines.append(f"Stats: {stats.files_changed} files, +{stats.additions}/-{stats.deletions} lines")

    if commit.diff:
        diff = commit.diff
        if len(diff) > MAX_DIFF_CHARS:
            diff = diff[:MAX_DIFF_CHARS] + "\n..."
        lines += ["Diff:", diff]

    lines += ["", "Return JSON only."]
    return "\n".join(lines)


def parse_ai_response(response: str) -> AIResponse:
    """Extract and validate the JSON object in a completion.

    Raises:
        AIClassificationError: If the response is empty or holds no valid object
    """
    text = response.strip()
    if not text:
        raise AIClassificationError("empty ai response")

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise AIClassificationError("no json object found in ai response")

    try:
        return AIResponse.model_validate_json(text[start : end + 1])
    except ValidationError as e:
        raise AIClassificationError(f"invalid ai response: {e}") from e


def to_classification(commit_hash: str, parsed: AIResponse) -> CommitClassification:
    """Normalize a validated AI answer into a classification."""
    reasoning = parsed.reasoning.strip()
    if len(reasoning) > MAX_REASON_CHARS:
        reasoning = reasoning[:MAX_REASON_CHARS] + "..."

    method = ClassifyMethod.AI
    skip_reason = parsed.skip_reason.strip()
    if parsed.should_skip:
        method = ClassifyMethod.SKIPPED
        skip_reason = skip_reason or "ai recommended skip"

    return CommitClassification(
        commit_hash=commit_hash,
        commit_type=CommitType.parse(parsed.type),
        scope=parsed.scope.strip(),
        confidence=parsed.confidence,
        method=method,
        reasoning=reasoning,
        is_breaking=parsed.is_breaking,
        breaking_reason=parsed.breaking_reason.strip(),
        should_skip=parsed.should_skip,
        skip_reason=skip_reason,
    )


class CompletionClassifier:
    """AIClassifier backed by a text completion service."""

    def __init__(self, service: CompletionService, system_prompt: str = SYSTEM_PROMPT) -> None:
        self.service = service
        self.system_prompt = system_prompt

    async def classify(self, commit: CommitInfo) -> CommitClassification:
        """Classify a commit with the completion service.

        Raises:
            AIClassificationError: If the service is unavailable or its
                answer cannot be parsed
        """
        if not self.service.is_available():
            raise AIClassificationError("ai service not available")

        response = await self.service.complete(self.system_prompt, build_user_prompt(commit))
        return to_classification(commit.hash, parse_ai_response(response))
