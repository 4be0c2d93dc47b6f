"""
Shared base for the role services.
"""

from typing import Any, Dict, Optional

from ..core.client import ResilientClient


def clean_filters(filters: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Drop empty filter values so they are not sent as query parameters."""
    if not filters:
        return None
    return {k: v for k, v in filters.items() if v is not None and v != ""}


class BaseService:
    """A thin wrapper binding endpoint paths to a ``ResilientClient``."""

    def __init__(self, client: ResilientClient):
        self.client = client
