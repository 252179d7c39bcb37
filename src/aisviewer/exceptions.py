"""Custom exception hierarchy for aisviewer."""

from __future__ import annotations


class AisViewerError(Exception):
    """Base exception for all aisviewer errors."""


class AisConfigError(AisViewerError):
    """Invalid or missing configuration."""


class AisTransportError(AisViewerError):
    """HTTP-level failure (network, timeout, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class AisApiError(AisViewerError):
    """The service answered with JSON that does not match the vessel payload shape."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: str = "",
    ) -> None:
        self.endpoint = endpoint
        super().__init__(message)
