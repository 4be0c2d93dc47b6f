"""
Resilient API client for the True Opinion REST backend.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from ..auth import RefreshCoordinator, SessionExpiredHook
from ..cache import ResponseCache
from ..circuit import CircuitBreaker, CircuitBreakerOptions
from ..common.messages import Severity
from ..errors import ApiError, classify_response
from ..middleware import (
    AuthHeaderMiddleware,
    CacheMiddleware,
    CircuitBreakerMiddleware,
    Pipeline,
    RefreshMiddleware,
    RetryMiddleware,
    transport_handler,
)
from ..notifications import LoggingNotifier, Notifier
from ..resilience import RetryPolicy
from ..token import MemoryTokenStore, TokenStore
from ..transport import AiohttpTransport, Transport
from .config import ClientConfig
from .types import ApiRequest, ProgressCallback, UploadFile

logger = logging.getLogger(__name__)


class ResilientClient:
    """
    Single entry point for every call the application makes to the API.

    One client is one session: it owns the circuit breaker, the response
    cache, the refresh coordinator and the transport, and shares them across
    all calls made through it. Each call runs through the middleware
    pipeline (cache, refresh-on-401, circuit breaker, retry, auth header)
    and ends in exactly one outcome: the decoded response body, or one
    ``ApiError``. Terminal failures are reported to the notifier once per
    call unless the call is ``silent``.

    Example:
        async with ResilientClient(ClientConfig(base_url="https://api.example.com")) as client:
            profile = await client.get("/patient/profile", cache=True)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
        token_store: Optional[TokenStore] = None,
        notifier: Optional[Notifier] = None,
        on_session_expired: Optional[SessionExpiredHook] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration (defaults to ``ClientConfig()``)
            transport: Network transport (defaults to an aiohttp transport)
            token_store: Access token storage (defaults to in-memory)
            notifier: User notification surface (defaults to logging)
            on_session_expired: Called once each time the session ends
            clock: Millisecond clock shared by the breaker and the cache
            sleep: Coroutine used for retry backoff, in seconds
        """
        self.config = config or ClientConfig()
        self.transport = transport or AiohttpTransport(
            base_url=self.config.base_url,
            timeout_ms=self.config.timeout_ms,
            headers=self.config.default_headers(),
        )
        self.notifier = notifier or LoggingNotifier()

        self._token_store = token_store or MemoryTokenStore()
        self._policy = RetryPolicy.from_config(self.config.retry)
        self._breaker = CircuitBreaker(
            CircuitBreakerOptions(
                max_failures=self.config.retry.max_failures,
                reset_timeout_ms=self.config.retry.reset_timeout_ms,
            ),
            clock=clock,
        )
        self._cache = ResponseCache(default_ttl_ms=self.config.cache_ttl_ms, clock=clock)
        self._refresh = RefreshCoordinator(
            self._token_store,
            self._request_new_token,
            on_session_expired=on_session_expired,
        )
        self._pipeline = Pipeline(
            [
                CacheMiddleware(self._cache),
                RefreshMiddleware(self._refresh),
                CircuitBreakerMiddleware(self._breaker),
                RetryMiddleware(self._policy, sleep=sleep),
                AuthHeaderMiddleware(self._token_store),
            ],
            transport_handler(self.transport),
        )

        logger.info(f"Client initialized for {self.config.base_url}")

    @classmethod
    def new(cls, config: ClientConfig, **kwargs) -> "ResilientClient":
        """
        Create a client after validating the configuration.

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        config.validate()
        return cls(config, **kwargs)

    @property
    def breaker(self) -> CircuitBreaker:
        return self._breaker

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def token_store(self) -> TokenStore:
        return self._token_store

    @property
    def refresh_coordinator(self) -> RefreshCoordinator:
        return self._refresh

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._policy

    async def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        data: Any = None,
        headers: Optional[Dict[str, str]] = None,
        cache: Optional[bool] = None,
        cache_ttl_ms: Optional[int] = None,
        idempotent: Optional[bool] = None,
        silent: bool = False,
        timeout_ms: Optional[int] = None,
        success_message: Optional[str] = None,
        refresh_on_401: bool = True,
        upload: Optional[UploadFile] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Any:
        """
        Perform one logical call and return the decoded response body.

        Args:
            method: HTTP method
            url: Path relative to ``config.base_url``, or an absolute URL
            params: Query string parameters
            data: JSON request body
            headers: Extra request headers
            cache: Serve from / store in the response cache (GET only);
                defaults to ``config.cache_reads``
            cache_ttl_ms: Per-call cache TTL
            idempotent: Override the method's idempotency; non-idempotent
                calls are never retried
            silent: Do not notify the user about this call
            timeout_ms: Per-call timeout
            success_message: Notify this message when the call succeeds
            refresh_on_401: Refresh the token and replay once on 401
            upload: File to send as multipart form data
            on_progress: Upload progress callback receiving 0-100

        Raises:
            ApiError: The classified terminal failure
        """
        request = ApiRequest(
            method=method,
            url=url,
            headers=dict(headers or {}),
            params=params,
            body=data,
            idempotent=idempotent,
            refresh_on_401=refresh_on_401,
            cache=self.config.cache_reads if cache is None else cache,
            cache_ttl_ms=cache_ttl_ms,
            silent=silent,
            timeout_ms=timeout_ms,
            upload=upload,
            on_progress=on_progress,
            success_message=success_message,
        )
        return await self.send(request)

    async def send(self, request: ApiRequest) -> Any:
        """Run a prepared request through the pipeline."""
        request.retries_left = self._policy.max_attempts if request.idempotent else 0
        logger.debug(f"Request {request.describe()}")

        try:
            response = await self._pipeline(request)
        except ApiError as e:
            logger.warning(f"{request.describe()} failed: {e}")
            if not request.silent:
                self.notifier.notify(e.severity, e.message)
            raise

        if request.success_message and not request.silent:
            self.notifier.notify(Severity.SUCCESS, request.success_message)

        return response.data

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None, **options) -> Any:
        """Perform a GET request."""
        return await self.request("GET", url, params=params, **options)

    async def post(self, url: str, data: Any = None, **options) -> Any:
        """Perform a POST request (not retried unless ``idempotent=True``)."""
        return await self.request("POST", url, data=data, **options)

    async def put(self, url: str, data: Any = None, **options) -> Any:
        """Perform a PUT request."""
        return await self.request("PUT", url, data=data, **options)

    async def patch(self, url: str, data: Any = None, **options) -> Any:
        """Perform a PATCH request (not retried unless ``idempotent=True``)."""
        return await self.request("PATCH", url, data=data, **options)

    async def delete(self, url: str, **options) -> Any:
        """Perform a DELETE request."""
        return await self.request("DELETE", url, **options)

    async def upload_file(
        self,
        url: str,
        file: UploadFile,
        on_progress: Optional[ProgressCallback] = None,
        **options,
    ) -> Any:
        """
        Upload a file as multipart form data.

        Uses ``config.upload_timeout_ms`` unless ``timeout_ms`` is given.
        Uploads are not retried.
        """
        options.setdefault("timeout_ms", self.config.upload_timeout_ms)
        options.setdefault("idempotent", False)
        return await self.request("POST", url, upload=file, on_progress=on_progress, **options)

    async def _request_new_token(self) -> str:
        """
        Exchange the current session for a new access token.

        Sent straight to the transport so it bypasses the refresh, retry and
        breaker stages.
        """
        current = await self._token_store.get()
        headers = {"Authorization": f"Bearer {current}"} if current else {}
        request = ApiRequest("POST", self.config.refresh_path, headers=headers, idempotent=False)

        response = await self.transport.send(request)
        if response.status >= 400:
            raise classify_response(response.status, response.data)

        body = response.data if isinstance(response.data, dict) else {}
        return body.get("token") or body.get("access_token")

    def clear_cache(self) -> None:
        self._cache.clear()

    async def close(self) -> None:
        """Release the transport."""
        await self.transport.close()
        logger.info("Client closed")

    async def __aenter__(self) -> "ResilientClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
