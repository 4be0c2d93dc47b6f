"""
Administration service.
"""

from typing import Any, Dict, List, Optional

from ..common.messages import SUCCESS_MESSAGES
from .base import BaseService, clean_filters
from .endpoints import AdminEndpoints


class AdminService(BaseService):
    """User management, doctor vetting, broadcasts and analytics."""

    async def get_users(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(AdminEndpoints.USERS, params=clean_filters(filters))

    async def get_users_by_type(self, user_type: str) -> Any:
        return await self.client.get(f"{AdminEndpoints.USERS}/type/{user_type}")

    async def suspend_user(self, user_id) -> Any:
        return await self.client.post(AdminEndpoints.user_suspend(user_id))

    async def activate_user(self, user_id) -> Any:
        return await self.client.post(AdminEndpoints.user_activate(user_id))

    async def get_pending_doctors(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(AdminEndpoints.DOCTORS_PENDING, params=clean_filters(filters))

    async def approve_doctor(self, doctor_id, approval: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.post(
            AdminEndpoints.doctor_approve(doctor_id),
            approval or {},
            success_message=SUCCESS_MESSAGES.doctor_approved,
        )

    async def reject_doctor(self, doctor_id, reason: str) -> Any:
        return await self.client.post(
            AdminEndpoints.doctor_reject(doctor_id),
            {"reason": reason},
            success_message=SUCCESS_MESSAGES.doctor_rejected,
        )

    async def bulk_review_doctors(self, doctor_ids: List[Any], action: str, reason: Optional[str] = None) -> Any:
        """Approve or reject several doctors at once (``action`` is ``APPROVE`` or ``REJECT``)."""
        return await self.client.post(
            AdminEndpoints.DOCTORS_BULK,
            {"doctorIds": list(doctor_ids), "action": action, "reason": reason},
        )

    async def get_notifications(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(AdminEndpoints.NOTIFICATIONS, params=clean_filters(filters))

    async def send_bulk_notification(self, notification: Dict[str, Any]) -> Any:
        return await self.client.post(
            f"{AdminEndpoints.NOTIFICATIONS}/bulk",
            notification,
            success_message=SUCCESS_MESSAGES.notification_sent,
        )

    async def get_analytics(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.client.get(AdminEndpoints.ANALYTICS, params=clean_filters(filters), cache=True)
