"""Errors raised by upstream API clients."""
from typing import Optional


class ClientError(Exception):
    """Base class for upstream client failures."""


class UpstreamError(ClientError):
    """Upstream API answered with a non-success status."""

    def __init__(self, status_code: int, reason: Optional[str] = None):
        self.status_code = status_code
        self.reason = reason or ''
        super().__init__(f"Upstream returned {status_code}: {self.reason}")


class GeocodingError(ClientError):
    """Address could not be resolved to a usable US location."""


class DistanceMatrixError(ClientError):
    """Distance matrix request was rejected."""
