"""
Core request and response types for the True Opinion client.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from ..common.utils import generate_request_id


IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
CACHEABLE_METHODS = frozenset({"GET"})

ProgressCallback = Callable[[int], None]


@dataclass
class UploadFile:
    """A file sent as multipart form data, with optional extra form fields."""
    filename: str
    content: bytes
    content_type: str = "application/pdf"
    field_name: str = "file"
    fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class ApiRequest:
    """
    A single logical call to the API.

    Built once per call. Only ``retries_left`` and ``auth_retried`` change
    while the call is in flight.

    Attributes:
        method: HTTP method, upper-case
        url: Path relative to the base URL, or an absolute URL
        headers: Extra request headers
        params: Query string parameters
        body: JSON-serialisable request body
        idempotent: Whether the call is safe to repeat
        retries_left: Remaining retry budget for infrastructure failures
        auth_retried: Set once the call has been replayed after a 401
        refresh_on_401: Whether a 401 should trigger a token refresh and replay
        cache: Whether the response may be served from / stored in the cache
        cache_ttl_ms: Per-call TTL override for the cache
        silent: Suppress user notifications for this call
        timeout_ms: Per-call timeout override
        upload: File to send as multipart form data
        on_progress: Upload progress callback receiving 0-100
        success_message: Notification shown when the call succeeds
    """
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Dict[str, Any]] = None
    body: Any = None
    idempotent: Optional[bool] = None
    retries_left: int = 0
    auth_retried: bool = False
    refresh_on_401: bool = True
    cache: bool = False
    cache_ttl_ms: Optional[int] = None
    silent: bool = False
    timeout_ms: Optional[int] = None
    upload: Optional[UploadFile] = None
    on_progress: Optional[ProgressCallback] = None
    success_message: Optional[str] = None
    request_id: str = field(default_factory=generate_request_id)

    def __post_init__(self):
        self.method = self.method.upper()
        if self.idempotent is None:
            self.idempotent = self.method in IDEMPOTENT_METHODS

    @property
    def is_cacheable(self) -> bool:
        """Only plain reads may be cached."""
        return self.cache and self.method in CACHEABLE_METHODS and self.upload is None

    @property
    def is_mutation(self) -> bool:
        return self.method not in SAFE_METHODS

    def describe(self) -> str:
        return f"{self.method} {self.url} [{self.request_id}]"


@dataclass
class ApiResponse:
    """HTTP response as seen by the client."""
    status: int
    data: Any = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status < 400
