"""
Authentication service: login, registration and session lifecycle.
"""

import logging
from typing import Any, Dict, Optional

from ..common.messages import SUCCESS_MESSAGES
from ..errors import ApiError, ClientError, UnauthorizedError
from .base import BaseService
from .endpoints import AuthEndpoints

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Signs users in and out and keeps the token store in step.

    Credential endpoints opt out of refresh-on-401: a 401 from the login
    endpoint means wrong credentials, not an expired session.
    """

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Sign in and store the returned token and user profile.

        Returns:
            The login response body
        """
        data = await self.client.post(
            AuthEndpoints.LOGIN,
            {"email": email, "password": password},
            refresh_on_401=False,
            success_message=SUCCESS_MESSAGES.login_success,
        )

        token = data.get("token") if isinstance(data, dict) else None
        if token:
            await self.client.token_store.set(token)
            user = {k: v for k, v in data.items() if k not in ("token", "type")}
            await self.client.token_store.set_user(user)
            logger.info(f"Signed in as {user.get('email', 'unknown user')}")

        return data

    async def register_patient(self, registration: Dict[str, Any]) -> Any:
        return await self.client.post(
            AuthEndpoints.REGISTER_PATIENT,
            registration,
            refresh_on_401=False,
            success_message=SUCCESS_MESSAGES.registration_success,
        )

    async def register_doctor(self, registration: Dict[str, Any]) -> Any:
        return await self.client.post(
            AuthEndpoints.REGISTER_DOCTOR,
            registration,
            refresh_on_401=False,
            success_message=SUCCESS_MESSAGES.registration_success,
        )

    async def forgot_password(self, email: str) -> Any:
        return await self.client.post(AuthEndpoints.FORGOT_PASSWORD, {"email": email}, refresh_on_401=False)

    async def reset_password(self, reset_token: str, password: str) -> Any:
        return await self.client.post(
            AuthEndpoints.RESET_PASSWORD,
            {"token": reset_token, "password": password},
            refresh_on_401=False,
        )

    async def validate_token(self) -> bool:
        """Check the stored token with the backend without notifying the user."""
        if not await self.client.token_store.get():
            return False

        try:
            await self.client.get(AuthEndpoints.VALIDATE, silent=True, refresh_on_401=False)
        except (UnauthorizedError, ClientError):
            return False
        return True

    async def refresh_token(self) -> str:
        """Force a token refresh through the client's single-flight coordinator."""
        return await self.client.refresh_coordinator.wait_for_token()

    async def logout(self) -> None:
        """Tell the backend, then clear local credentials whatever it answered."""
        try:
            await self.client.post(AuthEndpoints.LOGOUT, silent=True, refresh_on_401=False)
        except ApiError as e:
            logger.warning(f"Logout request failed: {e}")
        finally:
            await self.client.token_store.clear()
            self.client.clear_cache()

        logger.info("Signed out")

    async def is_authenticated(self) -> bool:
        return bool(await self.client.token_store.get())

    async def current_user(self) -> Optional[Dict[str, Any]]:
        return await self.client.token_store.get_user()
