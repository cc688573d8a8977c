"""Pydantic models for httprpc transport configuration."""

from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "Accept-Encoding": "gzip;q=1.0,deflate;q=0.6,identity;q=0.3",
}


class TransportConfig(BaseModel):
    """Configuration for the HTTP transport.

    Example in config.json:
        {
            "base_url": "https://api.example.com/rpc",
            "timeout": 30,
            "headers": {"X-Trace": "on"}
        }
    """

    model_config = ConfigDict(extra="forbid")

    base_url: str
    """Endpoint every JSON-RPC payload is POSTed to."""

    timeout: float = Field(default=60.0, gt=0)
    """Request timeout in seconds."""

    headers: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_HEADERS))
    """HTTP headers sent with every request."""

    verify: bool = True
    """Verify TLS certificates."""

    follow_redirects: bool = False
    """Follow HTTP redirects."""

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"base_url must use http or https, got: {v!r}")
        if not parsed.netloc:
            raise ValueError(f"base_url must include a host, got: {v!r}")
        return v
