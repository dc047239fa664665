"""Error taxonomy for the search gateway.

Hierarchy:
    GatewayError (base)
    ├── InvalidInput          400, no upstream calls made
    ├── ConfigurationError    500, raised before any network call
    ├── UpstreamUnavailable   500, non-success status or transport failure
    ├── UpstreamMalformed     500, success status without the expected fields
    └── PersistenceFailure    history store failure (writes are swallowed)

The exception message carries the detail for the server log.
``public_message`` is the only text a client ever sees.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for every error raised while resolving a query."""

    status_code: int = 500
    public_message: str = "Search failed. Please try again later."

    def __init__(self, message: str = "", *, provider: str | None = None) -> None:
        super().__init__(message or self.public_message)
        self.provider = provider

    def to_dict(self) -> dict[str, str]:
        return {"error": self.public_message}


class InvalidInput(GatewayError):
    status_code = 400
    public_message = "Query is required"


class ConfigurationError(GatewayError):
    public_message = "Search service is not configured"


class UpstreamUnavailable(GatewayError):
    public_message = "Search provider is unavailable. Please try again later."


class UpstreamMalformed(GatewayError):
    public_message = "Search provider returned an unexpected response."


class PersistenceFailure(GatewayError):
    public_message = "Search history is unavailable."
