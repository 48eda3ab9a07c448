"""Conventional commit parsing.

Parses commit messages following the Conventional Commits specification:
https://www.conventionalcommits.org/

Format: <type>[optional scope][!]: <description>

    [optional body]

    [optional footer(s)]
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from commit_intent.core.types import CONVENTIONAL_TYPES, CommitType
from commit_intent.exceptions import CommitValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from commit_intent.config.models import ParseConfig

# Subject line: type(scope)!: description
CONVENTIONAL_COMMIT_PATTERN = re.compile(
    r"^(?P<type>" + "|".join(t.value for t in CONVENTIONAL_TYPES) + r")"
    r"(?:\((?P<scope>[^)]+)\))?"
    r"(?P<breaking>!)?"
    r":\s*"
    r"(?P<description>.+)$"
)

BREAKING_CHANGE_PATTERN = re.compile(r"^BREAKING[ -]CHANGE:\s*(.+)$", re.IGNORECASE | re.MULTILINE)

# #123, GH-123, fixes #123, closes GH-7, ...
REFERENCE_PATTERN = re.compile(
    r"(?:(?:close[sd]?|fix(?:e[sd])?|resolve[sd]?)\s+)?(?:#|GH-)(\d+)",
    re.IGNORECASE,
)

FOOTER_PREFIXES: tuple[str, ...] = (
    "BREAKING CHANGE:",
    "BREAKING-CHANGE:",
    "CO-AUTHORED-BY:",
    "SIGNED-OFF-BY:",
    "REVIEWED-BY:",
    "ACKED-BY:",
    "RESOLVES:",
    "CLOSES:",
    "FIXES:",
    "REFS:",
)


@dataclass(frozen=True)
class Commit:
    """A commit as read from the repository."""

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime | None = None


@dataclass(frozen=True)
class Reference:
    """An issue or pull request reference found in a commit message."""

    kind: str
    id: int
    raw: str


@dataclass(frozen=True)
class ParsedCommit:
    """A commit message broken into its conventional commit parts."""

    commit_type: CommitType
    description: str
    scope: str | None = None
    body: str = ""
    footer: str = ""
    is_breaking: bool = False
    breaking_description: str = ""
    references: tuple[Reference, ...] = ()
    is_conventional: bool = False
    subject: str = ""
    commit: Commit | None = field(default=None, compare=False)

    @classmethod
    def from_commit(cls, commit: Commit, options: ParseConfig | None = None) -> ParsedCommit:
        """Parse a repository commit, keeping its metadata for filtering."""
        return replace(parse_commit(commit.message, options), commit=commit)

    @property
    def sha(self) -> str:
        return self.commit.sha if self.commit else ""

    @property
    def author_email(self) -> str:
        return self.commit.author_email if self.commit else ""

    @property
    def date(self) -> datetime | None:
        return self.commit.date if self.commit else None


def parse_commit(message: str, options: ParseConfig | None = None) -> ParsedCommit:
    """Parse a commit message.

    Args:
        message: Raw commit message
        options: Parsing options; defaults to lenient parsing with
            reference extraction enabled

    Returns:
        ParsedCommit. Messages that don't match the conventional format come
        back with is_conventional=False and the subject as description.

    Raises:
        CommitValidationError: If strict mode is on and the subject line
            does not follow the conventional commit format
    """
    strict_mode = options.strict_mode if options is not None else False
    parse_references = options.parse_references if options is not None else True

    subject, body = split_message(message)
    references = extract_references(message) if parse_references else ()

    match = CONVENTIONAL_COMMIT_PATTERN.match(subject)
    if match is None:
        if strict_mode:
            raise CommitValidationError(
                "commit message does not follow conventional commit format",
                subject=subject,
            )
        return ParsedCommit(
            commit_type=CommitType.UNKNOWN,
            description=subject,
            body=body,
            references=references,
            subject=subject,
        )

    is_breaking = match.group("breaking") == "!"
    breaking_description = ""
    body, footer = split_body_and_footer(body)

    if not is_breaking and footer:
        breaking_match = BREAKING_CHANGE_PATTERN.search(footer)
        if breaking_match:
            is_breaking = True
            breaking_description = breaking_match.group(1).strip()

    return ParsedCommit(
        commit_type=CommitType(match.group("type")),
        description=match.group("description").strip(),
        scope=match.group("scope"),
        body=body,
        footer=footer,
        is_breaking=is_breaking,
        breaking_description=breaking_description,
        references=references,
        is_conventional=True,
        subject=subject,
    )


def parse_commits(commits: Iterable[Commit], options: ParseConfig | None = None) -> list[ParsedCommit]:
    """Parse a batch of repository commits, preserving order."""
    return [ParsedCommit.from_commit(commit, options) for commit in commits]


def split_message(message: str) -> tuple[str, str]:
    """Split a commit message into its subject line and body.

    The body starts after the first blank line. Wrapped subject lines before
    it belong to neither part.
    """
    header, _, body = message.strip().partition("\n\n")
    subject = header.split("\n", 1)[0]
    return subject.strip(), body.strip()


def split_body_and_footer(text: str) -> tuple[str, str]:
    """Separate the commit body from its trailing footer block.

    The first footer-looking line starts the footer. Everything after it,
    blank lines included, belongs to the footer.
    """
    body_lines: list[str] = []
    footer_lines: list[str] = []
    in_footer = False

    for line in text.split("\n"):
        if not in_footer and is_footer_line(line.strip()):
            in_footer = True
        if in_footer:
            footer_lines.append(line)
        else:
            body_lines.append(line)

    return "\n".join(body_lines).strip(), "\n".join(footer_lines).strip()


def is_footer_line(line: str) -> bool:
    """Check whether a (stripped) line opens a footer."""
    if line.upper().startswith(FOOTER_PREFIXES):
        return True
    if not line:
        return False

    # Generic git trailers: "Token: value" or "Token #value"
    for separator in (": ", " #"):
        token, found, _ = line.partition(separator)
        if found and " " not in token:
            return True
    return False


def extract_references(message: str) -> tuple[Reference, ...]:
    """Extract issue/PR references from a commit message, in order."""
    references = []
    for match in REFERENCE_PATTERN.finditer(message):
        raw = match.group(0)
        lowered = raw.lower()
        if "close" in lowered:
            kind = "closes"
        elif "fix" in lowered:
            kind = "fixes"
        elif "resolve" in lowered:
            kind = "resolves"
        else:
            kind = "ref"
        references.append(Reference(kind=kind, id=int(match.group(1)), raw=raw))
    return tuple(references)


def format_commit(parsed: ParsedCommit) -> str:
    """Render a parsed commit back into conventional commit text.

    Args:
        parsed: The commit to format

    Returns:
        "type(scope)!: description", then body and footer separated by
        blank lines. Empty sections are omitted.
    """
    header = parsed.commit_type.value
    if parsed.scope:
        header += f"({parsed.scope})"
    if parsed.is_breaking:
        header += "!"
    header += f": {parsed.description}"

    return "\n\n".join(block for block in (header, parsed.body, parsed.footer) if block)
