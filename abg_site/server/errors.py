"""Error types raised by the service layer.

Each error carries the HTTP status the API answers with and optional
structured details that are merged into the JSON error body.

Usage:
- Services raise a ``SiteError`` subclass when a business rule refuses an
  operation.
- ``site_error_handler`` turns it into ``{"detail": message, **details}``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SiteError(Exception):
    """Base error for refused operations.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code returned to the client.
        details: Optional structured payload added to the response body.
    """

    status_code: int = 400

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}


class ValidationFailedError(SiteError):
    """Raised when input is well-formed but breaks a business rule."""

    status_code = 400


class UnauthorizedError(SiteError):
    """Raised when the request carries no usable identity or password."""

    status_code = 401


class ForbiddenError(SiteError):
    """Raised when the caller's roles or ownership do not permit the operation."""

    status_code = 403


class NotFoundError(SiteError):
    """Raised when a referenced record does not exist."""

    status_code = 404

    def __init__(self, resource: str, identifier: Any = None, **kwargs: Any) -> None:
        message = f"{resource} not found" if identifier is None else f"{resource} {identifier} not found"
        super().__init__(message, **kwargs)


class ConflictError(SiteError):
    """Raised when the operation would duplicate an existing record."""

    status_code = 409


class PhaseFinalizedError(SiteError):
    """Raised when a finalized review phase would be modified."""

    status_code = 400

    def __init__(self, phase: str) -> None:
        super().__init__(f"Phase '{phase}' is finalized; unlock it before making changes")


class MaintenanceError(SiteError):
    """Raised for public requests while the site is in maintenance mode."""

    status_code = 503

    def __init__(self, message: str) -> None:
        super().__init__(message, details={"maintenance": True})
