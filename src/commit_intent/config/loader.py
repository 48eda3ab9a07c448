"""Configuration loading from pyproject.toml.

Settings live under the [tool.commit-intent] table. Missing tables fall
back to the defaults in commit_intent.config.models.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from commit_intent.config.models import CommitIntentConfig
from commit_intent.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

TOOL_KEY = "commit-intent"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in the given directory or one of its parents.

    Args:
        start: Directory to start searching from (defaults to cwd)

    Returns:
        Path to pyproject.toml

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
    """
    current = (start or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate

    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or any parent directory")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Read and parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigNotFoundError(f"Config file not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_commit_intent_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the [tool.commit-intent] table, or an empty dict."""
    return pyproject.get("tool", {}).get(TOOL_KEY, {})


def load_config(path: Path | None = None) -> CommitIntentConfig:
    """Load and validate configuration.

    Args:
        path: pyproject.toml, or a directory to search from

    Returns:
        Validated configuration

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
        ConfigValidationError: If the configuration is invalid
    """
    if path is not None and path.is_file():
        pyproject_path = path
    else:
        pyproject_path = find_pyproject_toml(path)

    raw = extract_commit_intent_config(load_pyproject_toml(pyproject_path))
    if not raw:
        logger.debug("No [tool.%s] table in %s, using defaults", TOOL_KEY, pyproject_path)

    try:
        return CommitIntentConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {pyproject_path}:\n{e}") from e
