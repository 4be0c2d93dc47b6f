"""
Retry stage with exponential backoff.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..core.types import ApiRequest, ApiResponse
from ..resilience import RetryPolicy
from .pipeline import Handler, Middleware

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class RetryMiddleware(Middleware):
    """
    Repeats a call after a retryable failure while its budget lasts.

    The budget is ``request.retries_left``, set by the client (zero for
    non-idempotent calls). Each retry consumes one unit and waits
    ``policy.delay_for(n)`` milliseconds, where ``n`` counts the retries
    already made. Cancellation propagates at once, including during the
    backoff sleep.
    """

    def __init__(self, policy: RetryPolicy, sleep: Optional[Sleep] = None):
        self.policy = policy
        self._sleep = sleep or asyncio.sleep

    async def __call__(self, request: ApiRequest, call_next: Handler) -> ApiResponse:
        attempt = 0
        while True:
            try:
                return await call_next(request)
            except Exception as e:
                if request.retries_left <= 0 or not self.policy.should_retry(e, attempt):
                    raise

                delay_ms = self.policy.delay_for(attempt)
                request.retries_left -= 1
                attempt += 1
                logger.warning(f"{request.describe()} failed ({e}), retry {attempt} "
                               f"in {delay_ms:.0f}ms, {request.retries_left} left")
                await self._sleep(delay_ms / 1000)
