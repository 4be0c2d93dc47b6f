"""
Authentication stages: bearer header injection and refresh-on-401.
"""

import dataclasses
import logging

from ..auth import RefreshCoordinator
from ..core.types import ApiRequest, ApiResponse
from ..errors import AuthExpiredError, UnauthorizedError
from ..token import TokenStore
from .pipeline import Handler, Middleware

logger = logging.getLogger(__name__)


class AuthHeaderMiddleware(Middleware):
    """
    Adds ``Authorization: Bearer <token>`` from the token store.

    The token is read on every attempt, so retries and replays pick up a
    token refreshed in the meantime. An Authorization header set by the
    caller is left untouched.
    """

    def __init__(self, token_store: TokenStore):
        self.token_store = token_store

    async def __call__(self, request: ApiRequest, call_next: Handler) -> ApiResponse:
        if "Authorization" in request.headers:
            return await call_next(request)

        token = await self.token_store.get()
        if not token:
            return await call_next(request)

        headers = {**request.headers, "Authorization": f"Bearer {token}"}
        return await call_next(dataclasses.replace(request, headers=headers))


class RefreshMiddleware(Middleware):
    """
    Turns a 401 into one token refresh and one replay.

    Concurrent 401s share a single refresh through the coordinator and are
    replayed in arrival order. A failed refresh, or a 401 on the replay,
    ends the session: credentials are cleared and ``AuthExpiredError`` is
    raised. The replay starts with a fresh retry budget.
    """

    def __init__(self, coordinator: RefreshCoordinator):
        self.coordinator = coordinator

    async def __call__(self, request: ApiRequest, call_next: Handler) -> ApiResponse:
        retry_budget = request.retries_left
        try:
            return await call_next(request)
        except UnauthorizedError as e:
            if not request.refresh_on_401 or request.auth_retried:
                raise
            first_error = e

        request.auth_retried = True
        request.retries_left = retry_budget
        await self.coordinator.wait_for_token()
        logger.debug(f"Replaying {request.describe()} with refreshed token")

        try:
            return await call_next(request)
        except UnauthorizedError as e:
            logger.warning(f"Refreshed token rejected for {request.describe()}")
            await self.coordinator.end_session(e)
            raise AuthExpiredError(cause=first_error) from e
