"""
Circuit breaker stage.
"""

from ..circuit import CircuitBreaker
from ..core.types import ApiRequest, ApiResponse
from .pipeline import Handler, Middleware


class CircuitBreakerMiddleware(Middleware):
    """
    Admits or rejects a call through the shared breaker.

    Sits outside the retry stage: the breaker is consulted once per logical
    call and counts one failure when the call's retries are exhausted.
    """

    def __init__(self, breaker: CircuitBreaker):
        self.breaker = breaker

    async def __call__(self, request: ApiRequest, call_next: Handler) -> ApiResponse:
        return await self.breaker.call(call_next, request)
