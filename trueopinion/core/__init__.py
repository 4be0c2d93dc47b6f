"""
Core module initialization
"""

from .config import ClientConfig, RetryConfig
from .types import (
    ApiRequest,
    ApiResponse,
    UploadFile,
    ProgressCallback,
    IDEMPOTENT_METHODS,
    SAFE_METHODS,
    CACHEABLE_METHODS,
)

__all__ = [
    "ClientConfig",
    "RetryConfig",
    "ApiRequest",
    "ApiResponse",
    "UploadFile",
    "ProgressCallback",
    "IDEMPOTENT_METHODS",
    "SAFE_METHODS",
    "CACHEABLE_METHODS",
]
