"""JSON loading for config files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from httprpc.core.errors import LoadError

logger = logging.getLogger(__name__)


def load_json_file(path: Path, error_context: str = "") -> dict[str, Any]:
    """Load and parse a JSON file with consistent error handling.

    Args:
        path: Path to the JSON file to load.
        error_context: Optional context string for error messages (e.g., "config").

    Returns:
        Parsed JSON as a dict. Returns empty dict if file is empty.

    Raises:
        LoadError: If the file doesn't exist, can't be read, contains invalid JSON,
            or contains non-dict JSON (e.g., array or scalar).
    """
    context_prefix = f"{error_context}: " if error_context else ""

    resolved = path.resolve()

    if not resolved.exists():
        raise LoadError(f"{context_prefix}File not found: {path}")

    logger.debug("Loading config file: %s", resolved)

    try:
        content = resolved.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise LoadError(f"{context_prefix}Failed to read file {path}: {e}") from e

    content = content.strip()
    if not content:
        return {}

    try:
        result = json.loads(content)
    except json.JSONDecodeError as e:
        raise LoadError(f"{context_prefix}Invalid JSON in {path}: {e}") from e

    if not isinstance(result, dict):
        raise LoadError(
            f"{context_prefix}Expected object in {path}, got {type(result).__name__}"
        )

    return result
