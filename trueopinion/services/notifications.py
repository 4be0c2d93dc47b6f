"""
Notification inbox service.
"""

from typing import Any

from .base import BaseService
from .endpoints import NotificationEndpoints


class NotificationService(BaseService):
    """Unread notifications and read receipts for the signed-in user."""

    async def get_unread(self) -> Any:
        return await self.client.get(NotificationEndpoints.UNREAD)

    async def get_unread_count(self) -> int:
        """Unread count for badge polling; failures are not shown to the user."""
        data = await self.client.get(NotificationEndpoints.UNREAD_COUNT, silent=True)
        if isinstance(data, dict):
            data = data.get("count", data.get("data", 0))
        return int(data or 0)

    async def mark_read(self, notification_id) -> Any:
        return await self.client.post(NotificationEndpoints.mark_read(notification_id), idempotent=True)

    async def mark_all_read(self) -> Any:
        return await self.client.post(NotificationEndpoints.MARK_ALL_READ, idempotent=True)
