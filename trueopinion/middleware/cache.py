"""
Response caching stage.
"""

import copy
import logging

from ..cache import ResponseCache, make_cache_key
from ..core.types import ApiRequest, ApiResponse
from .pipeline import Handler, Middleware

logger = logging.getLogger(__name__)


class CacheMiddleware(Middleware):
    """
    Serves cacheable reads from a ``ResponseCache`` and stores fresh ones.

    A hit returns without touching the rest of the chain: no breaker check,
    no retry budget, no network. A successful mutation drops every entry.
    Entries are copied on the way in and out, so callers never share them.
    """

    def __init__(self, cache: ResponseCache):
        self.cache = cache

    async def __call__(self, request: ApiRequest, call_next: Handler) -> ApiResponse:
        if not request.is_cacheable:
            response = await call_next(request)
            if request.is_mutation:
                self.cache.clear()
            return response

        key = make_cache_key(request.method, request.url, request.params, request.body)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {request.describe()}")
            return copy.deepcopy(cached)

        response = await call_next(request)
        self.cache.set(key, copy.deepcopy(response), request.cache_ttl_ms)
        return response
