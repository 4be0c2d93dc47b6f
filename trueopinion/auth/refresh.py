"""
Single-flight access token refresh.
"""

import asyncio
import inspect
import logging
from collections import deque
from typing import Awaitable, Callable, Deque, Optional, Union

from ..errors import AuthExpiredError
from ..token import TokenStore

logger = logging.getLogger(__name__)

RefreshFunc = Callable[[], Awaitable[str]]
SessionExpiredHook = Callable[[AuthExpiredError], Union[None, Awaitable[None]]]


class RefreshCoordinator:
    """
    Guarantees at most one outstanding token refresh.

    Every caller whose request was rejected with 401 calls
    ``wait_for_token()``. The first caller starts the refresh; everyone who
    arrives while it is in flight is queued behind it. When the refresh
    settles the whole queue is resolved (or rejected) in arrival order and
    discarded.

    The refresh itself runs in its own task, so cancelling one waiting
    caller never leaves the others without an answer.
    """

    def __init__(
        self,
        token_store: TokenStore,
        refresh_func: RefreshFunc,
        on_session_expired: Optional[SessionExpiredHook] = None,
    ):
        self.token_store = token_store
        self._refresh_func = refresh_func
        self._on_session_expired = on_session_expired
        self._pending: Deque[asyncio.Future] = deque()
        self._task: Optional[asyncio.Task] = None
        self.refresh_count = 0

    @property
    def is_refreshing(self) -> bool:
        return self._task is not None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def wait_for_token(self) -> str:
        """
        Wait for a fresh token, starting a refresh if none is running.

        Returns:
            The new access token

        Raises:
            AuthExpiredError: The refresh failed and the session was cleared
        """
        loop = asyncio.get_running_loop()
        waiter = loop.create_future()
        self._pending.append(waiter)

        if self._task is None:
            self._task = loop.create_task(self._refresh())
            logger.info("Access token rejected, refreshing")
        else:
            logger.debug(f"Refresh in flight, queued caller ({len(self._pending)} waiting)")

        return await waiter

    async def _refresh(self) -> None:
        self.refresh_count += 1

        try:
            token = await self._refresh_func()
            if not token:
                raise AuthExpiredError("Refresh response did not include a token")
            await self.token_store.set(token)
        except asyncio.CancelledError:
            self._settle_cancelled()
            raise
        except Exception as e:
            logger.warning(f"Token refresh failed: {e}")
            await self._expire_session(e)
            return

        waiters = self._settle()
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(token)

        logger.info(f"Token refreshed, replaying {len(waiters)} request(s)")

    async def _expire_session(self, cause: Exception) -> None:
        try:
            await self.token_store.clear()
        except Exception as e:
            logger.error(f"Failed to clear token store: {e}")

        waiters = self._settle()
        for waiter in waiters:
            if not waiter.done():
                waiter.set_exception(AuthExpiredError(cause=cause))

        await self._signal_expired(cause)

    async def end_session(self, cause: Optional[BaseException] = None) -> None:
        """Clear the stored credentials and signal that the session is over."""
        try:
            await self.token_store.clear()
        except Exception as e:
            logger.error(f"Failed to clear token store: {e}")

        await self._signal_expired(cause)

    async def _signal_expired(self, cause: Optional[BaseException]) -> None:
        logger.warning("Session expired, credentials cleared")
        if self._on_session_expired:
            try:
                outcome = self._on_session_expired(AuthExpiredError(cause=cause))
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                logger.error(f"Session expired callback failed: {e}")

    def _settle(self) -> Deque[asyncio.Future]:
        # Taking the queue and clearing the flag happen together, so a caller
        # arriving after this point starts a new refresh instead of waiting.
        waiters, self._pending = self._pending, deque()
        self._task = None
        return waiters

    def _settle_cancelled(self) -> None:
        for waiter in self._settle():
            waiter.cancel()
