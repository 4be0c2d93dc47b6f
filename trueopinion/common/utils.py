"""
Common utilities and helper functions for the True Opinion client.
"""

import hashlib
import json
import time
import uuid
from datetime import datetime, timezone
from typing import Any


def generate_request_id() -> str:
    """Generate a request ID for tracing."""
    return f"req_{uuid.uuid4().hex[:16]}"


def hash_string(data: str, algorithm: str = "sha256") -> str:
    """
    Hash a string using the specified algorithm.

    Args:
        data: String to hash
        algorithm: Hash algorithm (sha256, sha512)

    Returns:
        Hexadecimal hash string
    """
    if algorithm == "sha256":
        return hashlib.sha256(data.encode('utf-8')).hexdigest()
    elif algorithm == "sha512":
        return hashlib.sha512(data.encode('utf-8')).hexdigest()
    else:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")


def canonical_json(value: Any) -> str:
    """Serialize a value to JSON with sorted keys and no insignificant whitespace."""
    return json.dumps(value, sort_keys=True, separators=(',', ':'), default=str)


def monotonic_ms() -> float:
    """Milliseconds from a monotonic clock."""
    return time.monotonic() * 1000.0


def get_current_time() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


def join_url(base_url: str, path: str) -> str:
    """Join a base URL and a path, leaving absolute URLs untouched."""
    if path.startswith(("http://", "https://")):
        return path
    if not base_url:
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
