"""
Basic True Opinion client usage example.

This example demonstrates the fundamental client operations against a
running backend:
- Creating a client from configuration
- Logging in and reading the profile
- Cached reads
- Uploading a medical document
"""

import asyncio
import logging
import sys

from trueopinion import ClientConfig, ResilientClient
from trueopinion.errors import ApiError
from trueopinion.notifications import CallbackNotifier
from trueopinion.services import AuthService, FileService, PatientService, load_upload


def show(severity, message):
    print(f"  [{severity.value}] {message}")


async def basic_example(email: str, password: str, document: str = None):
    """Demonstrate basic client usage"""
    print("Basic True Opinion Client Example")
    print("=" * 30)

    # 1. Create configuration (env overrides, e.g. TRUEOPINION_BASE_URL)
    config = ClientConfig.from_env()

    # 2. Create the client
    client = ResilientClient.new(
        config,
        notifier=CallbackNotifier(show),
        on_session_expired=lambda error: print("  Session expired, please log in again"),
    )
    print(f"✓ Created client for {config.base_url}")

    try:
        auth = AuthService(client)
        patients = PatientService(client)

        # 3. Log in
        user = await auth.login(email, password)
        print(f"✓ Logged in as {user.get('firstName')} ({user.get('userType')})")

        # 4. Read the profile twice; the second read is served from cache
        await patients.get_profile()
        await patients.get_profile()
        print(f"✓ Profile read, {len(client.cache)} cached response(s)")

        # 5. Upload a document
        if document:
            upload = await load_upload(document)
            result = await FileService(client).upload(
                upload, user["id"], "MEDICAL_REPORT",
                on_progress=lambda pct: print(f"  upload {pct}%"),
            )
            print(f"✓ Uploaded {upload.filename}: {result}")

        # 6. Breaker state
        print(f"✓ Circuit breaker: {client.breaker.stats()}")

        await auth.logout()
        print("✓ Logged out")

    except ApiError as e:
        print(f"✗ {e}")

    finally:
        # 7. Cleanup
        await client.close()
        print("✓ Client closed")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("usage: basic_usage.py EMAIL PASSWORD [DOCUMENT]")
        sys.exit(1)
    logging.basicConfig(level=logging.INFO)
    asyncio.run(basic_example(*sys.argv[1:4]))
