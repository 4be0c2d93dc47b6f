"""
Scripted in-memory transport for tests, demos and offline development.
"""

import asyncio
import inspect
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple, Union

from ..core.types import ApiRequest, ApiResponse
from .base import Transport, report_progress

logger = logging.getLogger(__name__)

Handler = Callable[[ApiRequest], Any]
Scripted = Union[ApiResponse, BaseException, Handler]


@dataclass
class SentRequest:
    """Snapshot of a request as it reached the transport."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Dict[str, Any]] = None
    body: Any = None

    @property
    def bearer_token(self) -> Optional[str]:
        value = self.headers.get("Authorization", "")
        if value.startswith("Bearer "):
            return value[len("Bearer "):]
        return None


class MockTransport(Transport):
    """
    Transport that answers from scripted responses.

    Each route (method, path) holds a queue of scripted outcomes consumed in
    order: an ``ApiResponse``, an exception to raise, or a handler receiving
    the request and returning either of those (sync or async). A route
    registered with ``repeat=True`` answers every call once its queue is
    empty. Unknown routes answer 404.
    """

    def __init__(self, response_delay: float = 0.0):
        self.response_delay = response_delay
        self.requests: List[SentRequest] = []
        self._queues: Dict[Tuple[str, str], Deque[Scripted]] = {}
        self._defaults: Dict[Tuple[str, str], Scripted] = {}
        self.closed = False

    @staticmethod
    def _key(method: str, url: str) -> Tuple[str, str]:
        return method.upper(), url.split("?", 1)[0]

    def _add(self, method: str, url: str, outcome: Scripted, repeat: bool) -> "MockTransport":
        key = self._key(method, url)
        if repeat:
            self._defaults[key] = outcome
        else:
            self._queues.setdefault(key, deque()).append(outcome)
        return self

    def add_response(self, method: str, url: str, status: int = 200, data: Any = None,
                     headers: Optional[Dict[str, str]] = None, repeat: bool = False) -> "MockTransport":
        """Script a response for a route."""
        return self._add(method, url, ApiResponse(status=status, data=data, headers=headers or {}), repeat)

    def add_error(self, method: str, url: str, error: BaseException, repeat: bool = False) -> "MockTransport":
        """Script a transport-level failure (no response) for a route."""
        return self._add(method, url, error, repeat)

    def add_handler(self, method: str, url: str, handler: Handler, repeat: bool = True) -> "MockTransport":
        """Answer a route with a callable receiving the request."""
        return self._add(method, url, handler, repeat)

    def calls(self, method: Optional[str] = None, url: Optional[str] = None) -> List[SentRequest]:
        """Requests sent so far, optionally filtered by method and path."""
        return [
            r for r in self.requests
            if (method is None or r.method == method.upper())
            and (url is None or r.url.split("?", 1)[0] == url)
        ]

    def _next_outcome(self, request: ApiRequest) -> Scripted:
        key = self._key(request.method, request.url)
        queue = self._queues.get(key)
        if queue:
            return queue.popleft()
        if key in self._defaults:
            return self._defaults[key]
        return ApiResponse(status=404, data={"message": f"No mock response for {key[0]} {key[1]}"})

    async def send(self, request: ApiRequest) -> ApiResponse:
        self.requests.append(SentRequest(
            method=request.method,
            url=request.url,
            headers=dict(request.headers),
            params=dict(request.params) if request.params else None,
            body=request.body,
        ))
        logger.debug(f"Mock transport received {request.describe()}")

        outcome = self._next_outcome(request)

        if self.response_delay:
            await asyncio.sleep(self.response_delay)

        if callable(outcome) and not isinstance(outcome, (ApiResponse, BaseException)):
            outcome = outcome(request)
            if inspect.isawaitable(outcome):
                outcome = await outcome

        if isinstance(outcome, BaseException):
            raise outcome

        if request.upload is not None:
            report_progress(request.on_progress, request.upload.size, request.upload.size)

        return outcome

    async def close(self) -> None:
        self.closed = True
