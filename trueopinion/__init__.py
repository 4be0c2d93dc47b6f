"""
True Opinion Python Client

Resilient HTTP client for the True Opinion healthcare consultation API:
token refresh, retries, circuit breaking and response caching.
"""

__version__ = "0.1.0"
__author__ = "True Opinion Developers"

from .core.client import ResilientClient
from .core.config import ClientConfig, RetryConfig
from .core.types import ApiRequest, ApiResponse, UploadFile
from .errors import (
    ApiError,
    NetworkError,
    RequestTimeoutError,
    ClientError,
    ValidationError,
    UnauthorizedError,
    AuthExpiredError,
    SessionExpiredError,
    ServerError,
    RateLimitedError,
    CircuitOpenError,
)

__all__ = [
    "ResilientClient",
    "ClientConfig",
    "RetryConfig",
    "ApiRequest",
    "ApiResponse",
    "UploadFile",
    "ApiError",
    "NetworkError",
    "RequestTimeoutError",
    "ClientError",
    "ValidationError",
    "UnauthorizedError",
    "AuthExpiredError",
    "SessionExpiredError",
    "ServerError",
    "RateLimitedError",
    "CircuitOpenError",
]
