"""
Access token storage for the True Opinion client.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Dict, Any
import json
import logging

import aiofiles

logger = logging.getLogger(__name__)


class TokenStore(ABC):
    """Abstract base class for access token storage"""

    @abstractmethod
    async def get(self) -> Optional[str]:
        """Return the current access token, if any"""
        pass

    @abstractmethod
    async def set(self, token: str) -> None:
        """Replace the current access token"""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Forget the token and the signed-in user. Safe to call repeatedly."""
        pass

    async def get_user(self) -> Optional[Dict[str, Any]]:
        """Return the signed-in user profile, if the store keeps one"""
        return None

    async def set_user(self, user: Dict[str, Any]) -> None:
        """Remember the signed-in user profile"""
        pass

    async def close(self) -> None:
        """Close the token store and release resources"""
        pass


class MemoryTokenStore(TokenStore):
    """In-memory token store for development and testing"""

    def __init__(self, token: Optional[str] = None):
        self._token = token
        self._user: Optional[Dict[str, Any]] = None

    async def get(self) -> Optional[str]:
        return self._token

    async def set(self, token: str) -> None:
        self._token = token

    async def clear(self) -> None:
        self._token = None
        self._user = None

    async def get_user(self) -> Optional[Dict[str, Any]]:
        return self._user

    async def set_user(self, user: Dict[str, Any]) -> None:
        self._user = user


class FileTokenStore(TokenStore):
    """
    Durable token store backed by a small JSON file.

    The file holds ``{"token": ..., "user": ...}`` and survives restarts,
    the way the browser build kept the token in local storage.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._cache: Optional[Dict[str, Any]] = None

    async def _load(self) -> Dict[str, Any]:
        if self._cache is not None:
            return self._cache

        if not self.path.exists():
            self._cache = {}
            return self._cache

        try:
            async with aiofiles.open(self.path, 'r', encoding='utf-8') as f:
                content = await f.read()
            self._cache = json.loads(content) if content.strip() else {}
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read token file {self.path}: {e}")
            self._cache = {}

        return self._cache

    async def _save(self, data: Dict[str, Any]) -> None:
        self._cache = data
        self.path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.path, 'w', encoding='utf-8') as f:
            await f.write(json.dumps(data, indent=2))

    async def get(self) -> Optional[str]:
        data = await self._load()
        return data.get("token")

    async def set(self, token: str) -> None:
        data = dict(await self._load())
        data["token"] = token
        await self._save(data)
        logger.debug(f"Stored access token in {self.path}")

    async def clear(self) -> None:
        self._cache = {}
        if self.path.exists():
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
            logger.debug(f"Removed token file {self.path}")

    async def get_user(self) -> Optional[Dict[str, Any]]:
        data = await self._load()
        return data.get("user")

    async def set_user(self, user: Dict[str, Any]) -> None:
        data = dict(await self._load())
        data["user"] = user
        await self._save(data)


class RedisTokenStore(TokenStore):
    """Redis-based token store for sessions shared between processes"""

    def __init__(self, redis_client, session_key: str = "default", ttl_seconds: Optional[int] = None):
        """
        Initialize Redis token store

        Args:
            redis_client: ``redis.asyncio.Redis`` instance
            session_key: Name of the session the token belongs to
            ttl_seconds: Optional expiry for the stored values
        """
        self.redis = redis_client
        self.prefix = f"trueopinion:session:{session_key}:"
        self.ttl_seconds = ttl_seconds

    @property
    def token_key(self) -> str:
        return f"{self.prefix}token"

    @property
    def user_key(self) -> str:
        return f"{self.prefix}user"

    @staticmethod
    def _decode(value) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode('utf-8')
        return value

    async def get(self) -> Optional[str]:
        return self._decode(await self.redis.get(self.token_key))

    async def set(self, token: str) -> None:
        await self.redis.set(self.token_key, token, ex=self.ttl_seconds)

    async def clear(self) -> None:
        await self.redis.delete(self.token_key, self.user_key)

    async def get_user(self) -> Optional[Dict[str, Any]]:
        raw = self._decode(await self.redis.get(self.user_key))
        return json.loads(raw) if raw else None

    async def set_user(self, user: Dict[str, Any]) -> None:
        await self.redis.set(self.user_key, json.dumps(user), ex=self.ttl_seconds)

    async def close(self) -> None:
        await self.redis.aclose()


def create_token_store(store_type: str = "memory", **kwargs) -> TokenStore:
    """
    Factory function to create token stores

    Args:
        store_type: Type of store ("memory", "file" or "redis")
        **kwargs: Additional arguments for the store

    Returns:
        TokenStore instance
    """
    if store_type == "memory":
        return MemoryTokenStore()
    elif store_type == "file":
        path = kwargs.get("path")
        if not path:
            raise ValueError("path is required for file token store")
        return FileTokenStore(path)
    elif store_type == "redis":
        redis_client = kwargs.get("redis_client")
        if redis_client is None:
            redis_url = kwargs.get("redis_url")
            if not redis_url:
                raise ValueError("redis_client or redis_url is required for Redis token store")
            import redis.asyncio as redis
            redis_client = redis.from_url(redis_url)
        return RedisTokenStore(
            redis_client,
            session_key=kwargs.get("session_key", "default"),
            ttl_seconds=kwargs.get("ttl_seconds"),
        )
    else:
        raise ValueError(f"Unknown store type: {store_type}")
