"""
Doctor service.
"""

from typing import Any, Dict, Optional

from ..common.messages import SUCCESS_MESSAGES
from .base import BaseService, clean_filters
from .endpoints import DoctorEndpoints


class DoctorService(BaseService):
    """Profile, application review, availability and earnings for doctors."""

    async def get_profile(self) -> Any:
        return await self.client.get(DoctorEndpoints.PROFILE, cache=True)

    async def update_profile(self, profile: Dict[str, Any]) -> Any:
        return await self.client.put(
            DoctorEndpoints.PROFILE, profile, success_message=SUCCESS_MESSAGES.profile_updated
        )

    async def get_applications(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(DoctorEndpoints.APPLICATIONS, params=clean_filters(filters))

    async def get_applications_by_status(self, status: str) -> Any:
        return await self.client.get(f"{DoctorEndpoints.APPLICATIONS}/status/{status}")

    async def review_application(self, application_id, review: Dict[str, Any]) -> Any:
        return await self.client.post(
            f"{DoctorEndpoints.APPLICATIONS}/{application_id}/review",
            review,
            success_message=SUCCESS_MESSAGES.review_submitted,
        )

    async def get_availability(self) -> Any:
        return await self.client.get(DoctorEndpoints.AVAILABILITY)

    async def update_availability(self, availability: Dict[str, Any]) -> Any:
        return await self.client.put(
            DoctorEndpoints.AVAILABILITY,
            availability,
            success_message=SUCCESS_MESSAGES.availability_updated,
        )

    async def update_availability_status(self, available: bool) -> Any:
        return await self.client.put(f"{DoctorEndpoints.AVAILABILITY}/status", {"available": available})

    async def get_earnings(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(DoctorEndpoints.EARNINGS, params=clean_filters(filters))

    async def get_earnings_history(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(f"{DoctorEndpoints.EARNINGS}/history", params=clean_filters(filters))

    async def get_notifications(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(DoctorEndpoints.NOTIFICATIONS, params=clean_filters(filters))

    async def get_unread_notifications(self) -> Any:
        return await self.client.get(f"{DoctorEndpoints.NOTIFICATIONS}/unread")

    async def get_unread_count(self) -> Any:
        return await self.client.get(f"{DoctorEndpoints.NOTIFICATIONS}/unread/count", silent=True)
