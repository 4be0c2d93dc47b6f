"""
Unauthenticated public endpoints.
"""

from typing import Any, Dict

from .base import BaseService
from .endpoints import PublicEndpoints


class PublicService(BaseService):

    async def get_stats(self) -> Any:
        return await self.client.get(PublicEndpoints.STATS, cache=True, silent=True)

    async def send_contact(self, message: Dict[str, Any]) -> Any:
        return await self.client.post(PublicEndpoints.CONTACT, message, refresh_on_401=False)
