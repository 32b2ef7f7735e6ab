"""
Domain exceptions shared by all portal apps.

Services raise these; views translate them to DRF responses through
``error_response``.
"""

from __future__ import annotations

from typing import Any

from rest_framework import status
from rest_framework.response import Response


class PortalError(Exception):
    """Base exception for all portal business-rule failures."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = 'error'

    def __init__(self, message: str, *, field: str | None = None, meta: dict[str, Any] | None = None):
        self.message = message
        self.field = field
        self.meta = meta or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {'detail': self.message, 'code': self.code}
        if self.field:
            result['field'] = self.field
        if self.meta:
            result.update(self.meta)
        return result


class ValidationFailed(PortalError):
    """Raised when input passes the serializer but violates a business rule."""

    code = 'invalid'


class RecordNotFound(PortalError):
    """Raised when a referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = 'not_found'


class InvalidTransition(PortalError):
    """
    Raised when a status change is not allowed from the current status.

    Attributes:
        current: status the record is in
        requested: status the caller asked for
    """

    status_code = status.HTTP_409_CONFLICT
    code = 'conflict'

    def __init__(self, *, model: str, current: str, requested: str, message: str | None = None):
        self.model = model
        self.current = current
        self.requested = requested
        super().__init__(
            message or f"{model} cannot move from '{current}' to '{requested}'.",
            meta={'current_status': current, 'requested_status': requested},
        )


class PermissionDenied(PortalError):
    """Raised when the caller may not act on this particular record."""

    status_code = status.HTTP_403_FORBIDDEN
    code = 'forbidden'


class RateLimitExceeded(PortalError):
    """Raised when a fixed-window counter is exhausted."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = 'rate_limited'

    def __init__(self, message: str = 'Too many requests. Please try again later.', *, retry_after_ms: int = 0):
        self.retry_after_ms = max(0, int(retry_after_ms))
        super().__init__(message, meta={'retry_after_ms': self.retry_after_ms})


class IntegrationError(PortalError):
    """Raised when an outbound HTTP integration fails."""

    status_code = status.HTTP_502_BAD_GATEWAY
    code = 'integration_error'

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(message, meta={'service': service})


class IntegrationNotConfigured(IntegrationError):
    """Raised when an integration is called without its API key."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = 'integration_not_configured'


def error_response(exc: PortalError) -> Response:
    """Translate a PortalError into a DRF response."""
    response = Response(exc.to_dict(), status=exc.status_code)
    if isinstance(exc, RateLimitExceeded) and exc.retry_after_ms:
        response['Retry-After'] = str(max(1, (exc.retry_after_ms + 999) // 1000))
    return response
