"""
Request pipeline: an ordered chain of middlewares ending in a transport.

Each middleware receives the request and a ``call_next`` handler for the
rest of the chain, so it can act before the call, after it, or instead of
it, and may call ``call_next`` more than once (retry, replay after refresh).
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from typing import Awaitable, Callable, List, Sequence

from ..core.types import ApiRequest, ApiResponse
from ..errors import classify_response
from ..transport.base import Transport

logger = logging.getLogger(__name__)

Handler = Callable[[ApiRequest], Awaitable[ApiResponse]]


class Middleware(ABC):
    """Base class for pipeline stages."""

    @abstractmethod
    async def __call__(self, request: ApiRequest, call_next: Handler) -> ApiResponse:
        """Handle the request, delegating to ``call_next`` for the rest of the chain."""
        pass


def transport_handler(transport: Transport) -> Handler:
    """
    Terminal handler: send the request and raise the classified error for
    any status >= 400.
    """
    async def send(request: ApiRequest) -> ApiResponse:
        response = await transport.send(request)
        if response.status >= 400:
            error = classify_response(response.status, response.data)
            logger.debug(f"{request.describe()} answered {response.status}: {error.code.value}")
            raise error
        return response

    return send


class Pipeline:
    """Runs a request through the middlewares in order, outermost first."""

    def __init__(self, middlewares: Sequence[Middleware], handler: Handler):
        self.middlewares: List[Middleware] = list(middlewares)
        self.handler = handler

    async def __call__(self, request: ApiRequest) -> ApiResponse:
        return await self._dispatch(0, request)

    async def _dispatch(self, index: int, request: ApiRequest) -> ApiResponse:
        if index >= len(self.middlewares):
            return await self.handler(request)
        middleware = self.middlewares[index]
        return await middleware(request, partial(self._dispatch, index + 1))
