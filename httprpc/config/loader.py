"""Transport configuration loading with layered merging.

Layers are applied in order, later layers overriding earlier ones:
1. Built-in defaults (DEFAULT_TRANSPORT_CONFIG)
2. A JSON config file, when a path is given
3. Caller overrides (a dict with the same shape as TransportConfig)
4. An explicit URL argument

Dicts (e.g. headers) are deep-merged so an override can add or replace a single
header without dropping the defaults. Everything else is replaced.
"""

import copy
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from httprpc.config.load_utils import load_json_file
from httprpc.config.schema import DEFAULT_HEADERS, TransportConfig
from httprpc.core.errors import ConfigError, LoadError
from httprpc.core.utils import deep_merge

logger = logging.getLogger(__name__)

DEFAULT_TRANSPORT_CONFIG: dict[str, Any] = {
    "timeout": 60.0,
    "headers": dict(DEFAULT_HEADERS),
    "verify": True,
    "follow_redirects": False,
}


def load_transport_config(
    url: str | None = None,
    overrides: dict[str, Any] | None = None,
    path: Path | None = None,
) -> TransportConfig:
    """Build a validated TransportConfig from defaults and overrides.

    Args:
        url: Endpoint URL. Takes precedence over any base_url in other layers.
        overrides: Values overlaid on the defaults (and the file, if any).
        path: Optional JSON config file.

    Returns:
        Validated TransportConfig.

    Raises:
        ConfigError: If the file can't be loaded or the merged config is invalid.
    """
    merged = copy.deepcopy(DEFAULT_TRANSPORT_CONFIG)
    sources = ["defaults"]

    if path is not None:
        try:
            file_data = load_json_file(path, error_context="config")
        except LoadError as e:
            raise ConfigError(e.message) from e
        merged = deep_merge(merged, file_data)
        sources.append(str(path))

    if overrides:
        merged = deep_merge(merged, overrides)
        sources.append("overrides")

    if url is not None:
        merged["base_url"] = url

    logger.debug("Transport config merged from: %s", sources)

    try:
        return TransportConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(
            f"Transport config validation failed (merged from {', '.join(sources)}): {e}"
        ) from e
