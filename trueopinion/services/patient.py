"""
Patient service.
"""

from typing import Any, Dict, Optional

from ..common.messages import SUCCESS_MESSAGES
from .base import BaseService, clean_filters
from .endpoints import PatientEndpoints


class PatientService(BaseService):
    """Profile, applications, doctor search and payments for patients."""

    async def get_profile(self) -> Any:
        return await self.client.get(PatientEndpoints.PROFILE, cache=True)

    async def update_profile(self, profile: Dict[str, Any]) -> Any:
        return await self.client.put(
            PatientEndpoints.PROFILE, profile, success_message=SUCCESS_MESSAGES.profile_updated
        )

    async def get_applications(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(PatientEndpoints.APPLICATIONS, params=clean_filters(filters))

    async def get_applications_by_status(self, status: str) -> Any:
        return await self.client.get(f"{PatientEndpoints.APPLICATIONS}/status/{status}")

    async def submit_application(self, application: Dict[str, Any]) -> Any:
        return await self.client.post(
            PatientEndpoints.APPLICATIONS,
            application,
            success_message=SUCCESS_MESSAGES.application_submitted,
        )

    async def get_doctors(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(PatientEndpoints.DOCTORS, params=clean_filters(filters), cache=True)

    async def get_doctors_by_specialization(self, specialization: str) -> Any:
        return await self.client.get(f"{PatientEndpoints.DOCTORS}/specialization/{specialization}", cache=True)

    async def get_payments(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(PatientEndpoints.PAYMENTS, params=clean_filters(filters))

    async def get_notifications(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(PatientEndpoints.NOTIFICATIONS, params=clean_filters(filters))

    async def get_unread_notifications(self) -> Any:
        return await self.client.get(f"{PatientEndpoints.NOTIFICATIONS}/unread")

    async def get_unread_count(self) -> Any:
        return await self.client.get(f"{PatientEndpoints.NOTIFICATIONS}/unread/count", silent=True)
