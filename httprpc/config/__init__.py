"""Configuration loading and validation."""

from httprpc.config.loader import DEFAULT_TRANSPORT_CONFIG, load_transport_config
from httprpc.config.schema import DEFAULT_HEADERS, TransportConfig

__all__ = [
    "DEFAULT_HEADERS",
    "DEFAULT_TRANSPORT_CONFIG",
    "TransportConfig",
    "load_transport_config",
]
