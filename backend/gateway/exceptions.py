"""
Notes Gateway — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for every failure an operation can hit.
How:   Each exception class carries a message, a machine-readable code and an
       optional context dict. The dispatcher turns them into per-request
       operation errors; global handlers in main.py turn any that escape into
       structured JSON responses.
Who:   Raised by services, clients and middleware.
When:  During request processing. None of them is fatal to the process.

Exception Hierarchy:
    GatewayError (base)
    ├── ValidationError          → bad operation name, arguments or field selection
    ├── MissingIdentityError     → no explicit author(s) and no caller identity
    ├── BackendError             → record or search service call failed
    ├── PublishError             → notification publish failed after a mutation
    └── RateLimitExceededError   → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class GatewayError(Exception):
    """
    Base exception for all gateway errors.

    Attributes:
        message:  User-facing error description (safe to return in a response)
        code:     Machine-readable error code
        context:  Additional debug info (logged, returned only where noted)
    """

    code = "gateway_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def public_details(self) -> Optional[Dict[str, Any]]:
        """The part of `context` that may be returned to the caller."""
        return None


class ValidationError(GatewayError):
    """
    Raised when the caller sent an operation the gateway cannot run.

    When:    Unknown operation, wrong argument types, unknown response field.
    HTTP:    400 Bad Request (when raised outside the dispatcher)
    """

    code = "validation_error"
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field

    def public_details(self) -> Optional[Dict[str, Any]]:
        return self.context or None


class MissingIdentityError(GatewayError):
    """
    Raised when an author must be derived from the caller but none is known.

    When:    `notes` without `authors`, or a mutation without `author`, on a
             request that carries no caller identity header.
    HTTP:    401 Unauthorized
    """

    code = "missing_identity"
    status_code = 401

    def __init__(
        self,
        message: str = "No author given and the request carries no caller identity",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class BackendError(GatewayError):
    """
    Raised when the record service or the search service call fails.

    What:    Transport error, timeout, or a non-2xx answer from upstream.
    HTTP:    502 Bad Gateway

    Security Note:
        The message returned to the caller is generic. Upstream status and
        response text are kept in `context` and logged server-side only.
    """

    code = "backend_error"
    status_code = 502

    def __init__(
        self,
        message: str = "The notes backend could not complete the request",
        service: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if service:
            ctx["service"] = service
        super().__init__(message=message, context=ctx)
        self.service = service

    def public_details(self) -> Optional[Dict[str, Any]]:
        if self.service:
            return {"service": self.service}
        return None


class PublishError(GatewayError):
    """
    Raised when a post-mutation notification cannot be published.

    What:    The mutation already succeeded at the record service; it is NOT
             rolled back. The caller is told the notification did not go out.
    HTTP:    502 Bad Gateway
    """

    code = "publish_error"
    status_code = 502

    def __init__(
        self,
        message: str = "The change was saved but its notification could not be published",
        channel: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if channel:
            ctx["channel"] = channel
        super().__init__(message=message, context=ctx)
        self.channel = channel

    def public_details(self) -> Optional[Dict[str, Any]]:
        if self.channel:
            return {"channel": self.channel}
        return None


class RateLimitExceededError(GatewayError):
    """
    Raised when a caller exceeds the request rate limit.

    HTTP:    429 Too Many Requests
    """

    code = "rate_limit_exceeded"
    status_code = 429

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after

    def public_details(self) -> Optional[Dict[str, Any]]:
        return {"retry_after": self.retry_after}
