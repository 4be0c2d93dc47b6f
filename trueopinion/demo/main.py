"""
True Opinion client demo.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

Runs the client against a scripted in-memory backend and shows:
- Login and token storage
- Transparent token refresh after a 401
- Response caching on the read path
- Retry, circuit breaker trip and recovery
"""

import asyncio
import logging
import sys

from trueopinion.common.messages import Severity
from trueopinion.core.client import ResilientClient
from trueopinion.core.config import ClientConfig, RetryConfig
from trueopinion.errors import ApiError, CircuitOpenError
from trueopinion.notifications import CallbackNotifier
from trueopinion.services import API_ENDPOINTS, AuthService, DoctorService, PatientService
from trueopinion.transport import MockTransport


def show_notification(severity: Severity, message: str) -> None:
    print(f"  [notify:{severity.value}] {message}")


def build_backend() -> MockTransport:
    backend = MockTransport()
    backend.add_response("POST", API_ENDPOINTS.AUTH.LOGIN, data={
        "token": "token-1", "type": "Bearer", "id": 7,
        "email": "patient@example.com", "firstName": "Asha", "userType": "PATIENT",
    })
    # First profile read is rejected, the refresh succeeds, the replay goes through
    backend.add_response("GET", API_ENDPOINTS.PATIENT.PROFILE, status=401, data={"message": "Token expired"})
    backend.add_response("POST", API_ENDPOINTS.AUTH.REFRESH_TOKEN, data={"token": "token-2"})
    backend.add_response("GET", API_ENDPOINTS.PATIENT.PROFILE, data={"id": 7, "firstName": "Asha"}, repeat=True)
    backend.add_response("GET", API_ENDPOINTS.DOCTOR.AVAILABILITY, status=503,
                         data={"message": "Service unavailable"}, repeat=True)
    backend.add_response("POST", API_ENDPOINTS.AUTH.LOGOUT, data={"success": True})
    return backend


async def run_demo() -> int:
    """Walk through the client's resilience features"""
    print("True Opinion Client Demo")
    print("=" * 50)
    print()

    config = ClientConfig(
        base_url="http://localhost:5173/api",
        retry=RetryConfig(max_attempts=1, max_failures=3, base_delay_ms=50,
                          max_delay_ms=100, reset_timeout_ms=500),
    )
    backend = build_backend()

    async with ResilientClient.new(config, transport=backend,
                                   notifier=CallbackNotifier(show_notification)) as client:
        auth = AuthService(client)
        patients = PatientService(client)
        doctors = DoctorService(client)

        print("Step 1: Login")
        print("-" * 40)
        await auth.login("patient@example.com", "secret")
        print(f"✓ Stored token: {await client.token_store.get()}")
        print()

        print("Step 2: Token refresh after 401")
        print("-" * 40)
        profile = await patients.get_profile()
        print(f"✓ Profile: {profile}")
        print(f"  - Refreshes performed: {client.refresh_coordinator.refresh_count}")
        print(f"  - Current token: {await client.token_store.get()}")
        print()

        print("Step 3: Cached read")
        print("-" * 40)
        before = len(backend.calls("GET", API_ENDPOINTS.PATIENT.PROFILE))
        await patients.get_profile()
        after = len(backend.calls("GET", API_ENDPOINTS.PATIENT.PROFILE))
        print(f"✓ Second profile read served from cache (network calls: {after - before})")
        print()

        print("Step 4: Circuit breaker")
        print("-" * 40)
        for attempt in range(1, 5):
            try:
                await doctors.get_availability()
            except CircuitOpenError as e:
                print(f"✓ Call {attempt} rejected without network: {e.message}")
            except ApiError as e:
                print(f"  Call {attempt} failed: {e}")
        print(f"  - Breaker state: {client.breaker.state.value}")

        backend.add_response("GET", API_ENDPOINTS.DOCTOR.AVAILABILITY, data={"slots": ["09:00", "10:30"]})
        await asyncio.sleep(config.retry.reset_timeout_ms / 1000)
        slots = await doctors.get_availability()
        print(f"✓ Trial call after cooldown succeeded: {slots}")
        print(f"  - Breaker state: {client.breaker.state.value}")
        print()

        await auth.logout()
        print("✓ Logged out, token cleared")

    print()
    print("Demo completed successfully")
    return 0


def main() -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    return asyncio.run(run_demo())


if __name__ == "__main__":
    sys.exit(main())
