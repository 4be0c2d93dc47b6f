# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Error taxonomy for the True Opinion API client.

Every failure a caller can observe is an ``ApiError`` subclass carrying a
structured error code, an optional HTTP status, a user-facing message and
free-form details. ``classify_response`` turns an HTTP error status into the
matching exception.
"""

from enum import Enum
from typing import Any, Dict, Optional

from ..common.messages import ERROR_MESSAGES, Severity


class ErrorCode(Enum):
    """Structured error codes for client failures."""

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    CLIENT_ERROR = "client_error"
    UNAUTHORIZED = "unauthorized"
    SESSION_EXPIRED = "session_expired"
    SERVER_ERROR = "server_error"
    RATE_LIMITED = "rate_limited"
    VALIDATION_FAILED = "validation_failed"
    CIRCUIT_OPEN = "circuit_open"
    CONFIGURATION_ERROR = "configuration_error"


class ApiError(Exception):
    """
    Base exception class for all client errors.

    Provides the error code, HTTP status (when a response arrived),
    the response body, and the message shown to users.
    """

    code: ErrorCode = ErrorCode.CLIENT_ERROR
    severity: Severity = Severity.ERROR
    retryable: bool = False

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        data: Any = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data
        self.details = details or {}
        self.cause = cause

    def is_retryable(self) -> bool:
        """Check if this error might be resolved by retrying."""
        return self.retryable

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "error": self.code.value,
            "message": self.message,
        }

        if self.status is not None:
            result["status"] = self.status

        if self.details:
            result["details"] = self.details

        if self.cause:
            result["caused_by"] = str(self.cause)

        return result

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.code.value} ({self.status}): {self.message}"
        return f"{self.code.value}: {self.message}"


class NetworkError(ApiError):
    """No response reached the client."""

    code = ErrorCode.NETWORK_ERROR
    retryable = True

    def __init__(self, message: str = ERROR_MESSAGES.network_error, **kwargs):
        super().__init__(message, **kwargs)


class RequestTimeoutError(NetworkError):
    """The request did not complete within its timeout."""

    code = ErrorCode.TIMEOUT

    def __init__(self, message: str = ERROR_MESSAGES.timeout, **kwargs):
        super().__init__(message, **kwargs)


class ClientError(ApiError):
    """A 4xx response other than 401."""

    code = ErrorCode.CLIENT_ERROR


class ValidationError(ClientError):
    """A 422 response carrying per-field messages."""

    code = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None, **kwargs):
        kwargs.setdefault("status", 422)
        super().__init__(message, **kwargs)
        self.field_errors = field_errors or {}
        if self.field_errors:
            self.details["field_errors"] = dict(self.field_errors)


class UnauthorizedError(ApiError):
    """A 401 response that has not yet gone through token refresh."""

    code = ErrorCode.UNAUTHORIZED

    def __init__(self, message: str = ERROR_MESSAGES.unauthorized, **kwargs):
        kwargs.setdefault("status", 401)
        super().__init__(message, **kwargs)


class AuthExpiredError(ApiError):
    """The session could not be recovered: refresh failed or the new token was rejected."""

    code = ErrorCode.SESSION_EXPIRED

    def __init__(self, message: str = ERROR_MESSAGES.session_expired, **kwargs):
        kwargs.setdefault("status", 401)
        super().__init__(message, **kwargs)


SessionExpiredError = AuthExpiredError


class ServerError(ApiError):
    """A 5xx response."""

    code = ErrorCode.SERVER_ERROR
    retryable = True

    def __init__(self, message: str = ERROR_MESSAGES.server_error, **kwargs):
        super().__init__(message, **kwargs)


class RateLimitedError(ApiError):
    """A 429 response."""

    code = ErrorCode.RATE_LIMITED
    severity = Severity.WARNING
    retryable = True

    def __init__(self, message: str = ERROR_MESSAGES.too_many_requests, **kwargs):
        kwargs.setdefault("status", 429)
        super().__init__(message, **kwargs)


class CircuitOpenError(ApiError):
    """The circuit breaker rejected the call without touching the network."""

    code = ErrorCode.CIRCUIT_OPEN
    severity = Severity.WARNING

    def __init__(self, message: str = ERROR_MESSAGES.circuit_open, reopens_in_ms: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.reopens_in_ms = reopens_in_ms
        if reopens_in_ms is not None:
            self.details["reopens_in_ms"] = round(reopens_in_ms)


class ConfigurationError(ApiError):
    """Raised when the client configuration is invalid."""

    code = ErrorCode.CONFIGURATION_ERROR

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


def _body_message(data: Any) -> Optional[str]:
    if isinstance(data, dict):
        message = data.get("message") or data.get("error")
        if isinstance(message, str) and message:
            return message
    return None


def extract_field_errors(data: Any) -> Dict[str, str]:
    """
    Extract per-field validation messages from a 422 body.

    Accepts ``{"errors": [{"field": ..., "message": ...}]}`` as well as
    ``{"errors": {"field": "message"}}``. List entries without a field are
    keyed by their position.
    """
    if not isinstance(data, dict):
        return {}

    errors = data.get("errors")
    field_errors: Dict[str, str] = {}

    if isinstance(errors, dict):
        for field, message in errors.items():
            if isinstance(message, (list, tuple)):
                message = "; ".join(str(m) for m in message)
            field_errors[str(field)] = str(message)
    elif isinstance(errors, list):
        for index, entry in enumerate(errors):
            if isinstance(entry, dict):
                field = entry.get("field") or str(index)
                message = entry.get("message") or entry.get("defaultMessage") or ""
            else:
                field, message = str(index), entry
            field_errors[str(field)] = str(message)

    return field_errors


def classify_response(status: int, data: Any = None) -> ApiError:
    """
    Map an HTTP error status and body to the matching ``ApiError``.

    Args:
        status: HTTP status code (>= 400)
        data: Decoded response body

    Returns:
        The classified error (not raised)
    """
    if status == 401:
        return UnauthorizedError(_body_message(data) or ERROR_MESSAGES.unauthorized, data=data)

    if status == 422:
        field_errors = extract_field_errors(data)
        if field_errors:
            message = "; ".join(m for m in field_errors.values() if m) or ERROR_MESSAGES.validation_error
        else:
            message = _body_message(data) or ERROR_MESSAGES.validation_error
        return ValidationError(message, field_errors=field_errors, data=data)

    if status == 429:
        return RateLimitedError(data=data)

    if status >= 500:
        return ServerError(status=status, data=data)

    if status == 403:
        return ClientError(ERROR_MESSAGES.forbidden, status=status, data=data)

    if status == 404:
        return ClientError(ERROR_MESSAGES.not_found, status=status, data=data)

    if status == 409:
        return ClientError(_body_message(data) or ERROR_MESSAGES.conflict, status=status, data=data)

    if status == 400:
        return ClientError(_body_message(data) or ERROR_MESSAGES.validation_error, status=status, data=data)

    return ClientError(_body_message(data) or ERROR_MESSAGES.generic_error, status=status, data=data)


__all__ = [
    'ErrorCode',
    'ApiError',
    'NetworkError',
    'RequestTimeoutError',
    'ClientError',
    'ValidationError',
    'UnauthorizedError',
    'AuthExpiredError',
    'SessionExpiredError',
    'ServerError',
    'RateLimitedError',
    'CircuitOpenError',
    'ConfigurationError',
    'extract_field_errors',
    'classify_response',
]
