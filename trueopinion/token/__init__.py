"""
Token module initialization
"""

from .store import TokenStore, MemoryTokenStore, FileTokenStore, RedisTokenStore, create_token_store

__all__ = [
    "TokenStore",
    "MemoryTokenStore",
    "FileTokenStore",
    "RedisTokenStore",
    "create_token_store",
]
