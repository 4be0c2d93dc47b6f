"""
Tests for the ResilientClient facade.
"""

import asyncio

import pytest

from trueopinion import ClientConfig, ResilientClient, RetryConfig, UploadFile
from trueopinion.common.messages import Severity
from trueopinion.core.types import ApiResponse
from trueopinion.errors import (
    ApiError,
    CircuitOpenError,
    ClientError,
    ConfigurationError,
    NetworkError,
    ServerError,
    ValidationError,
)
from trueopinion.transport import AiohttpTransport


class TestRequests:
    """Test the verb helpers and request shaping."""

    @pytest.mark.asyncio
    async def test_verbs_return_response_body(self, make_client, transport):
        transport.add_response("GET", "/patient/profile", data={"id": 1})
        transport.add_response("POST", "/patient/applications", data={"id": 2})
        transport.add_response("PUT", "/patient/profile", data={"id": 3})
        transport.add_response("PATCH", "/doctor/profile/fee", data={"id": 4})
        transport.add_response("DELETE", "/files/9", data={"id": 5})
        client = make_client()

        assert await client.get("/patient/profile") == {"id": 1}
        assert await client.post("/patient/applications", {"doctorId": 7}) == {"id": 2}
        assert await client.put("/patient/profile", {"name": "x"}) == {"id": 3}
        assert await client.patch("/doctor/profile/fee", {"fee": 500}) == {"id": 4}
        assert await client.delete("/files/9") == {"id": 5}

        assert [r.method for r in transport.requests] == ["GET", "POST", "PUT", "PATCH", "DELETE"]
        assert transport.requests[1].body == {"doctorId": 7}

    @pytest.mark.asyncio
    async def test_params_forwarded(self, make_client, transport):
        transport.add_response("GET", "/admin/users", data=[])
        client = make_client()

        await client.get("/admin/users", params={"page": 2})

        assert transport.requests[0].params == {"page": 2}

    @pytest.mark.asyncio
    async def test_bearer_token_attached(self, make_client, transport):
        transport.add_response("GET", "/patient/profile", data={})
        client = make_client(token="abc")

        await client.get("/patient/profile")

        assert transport.requests[0].bearer_token == "abc"

    @pytest.mark.asyncio
    async def test_no_header_without_token(self, make_client, transport):
        transport.add_response("GET", "/public/stats", data={})
        client = make_client()

        await client.get("/public/stats")

        assert "Authorization" not in transport.requests[0].headers

    @pytest.mark.asyncio
    async def test_explicit_authorization_kept(self, make_client, transport):
        transport.add_response("GET", "/auth/validate", data={})
        client = make_client(token="stored")

        await client.get("/auth/validate", headers={"Authorization": "Bearer explicit"})

        assert transport.requests[0].bearer_token == "explicit"

    @pytest.mark.asyncio
    async def test_retry_picks_up_token_changed_meanwhile(self, make_client, transport):
        client = make_client(token="one")

        async def rotate_then_fail(request):
            await client.token_store.set("two")
            return ServerError(status=503)

        transport.add_handler("GET", "/patient/profile", rotate_then_fail, repeat=False)
        transport.add_response("GET", "/patient/profile", data={})

        await client.get("/patient/profile")

        assert [r.bearer_token for r in transport.requests] == ["one", "two"]


class TestNotifications:
    """Test that each call notifies at most once."""

    @pytest.mark.asyncio
    async def test_one_notification_after_retries(self, make_client, transport, notifier):
        transport.add_error("GET", "/patient/profile", NetworkError(), repeat=True)
        client = make_client()

        with pytest.raises(NetworkError):
            await client.get("/patient/profile")

        assert len(transport.requests) == 4
        assert notifier.messages() == ["Network error. Please check your connection and try again."]
        assert notifier.notifications[0].severity == Severity.ERROR

    @pytest.mark.asyncio
    async def test_silent_call_not_notified(self, make_client, transport, notifier):
        transport.add_response("GET", "/notifications/unread/count", status=500, repeat=True)
        client = make_client()

        with pytest.raises(ServerError):
            await client.get("/notifications/unread/count", silent=True)

        assert notifier.messages() == []

    @pytest.mark.asyncio
    async def test_validation_messages_joined(self, make_client, transport, notifier):
        transport.add_response("POST", "/auth/register/patient", status=422, data={
            "errors": [
                {"field": "email", "message": "Email is required"},
                {"field": "phone", "message": "Phone is invalid"},
            ]
        })
        client = make_client()

        with pytest.raises(ValidationError) as exc_info:
            await client.post("/auth/register/patient", {})

        assert exc_info.value.field_errors == {"email": "Email is required", "phone": "Phone is invalid"}
        assert notifier.messages() == ["Email is required; Phone is invalid"]

    @pytest.mark.parametrize("status, message", [
        (403, "You do not have permission to perform this action."),
        (404, "The requested resource was not found."),
        (429, "Too many requests. Please try again later."),
        (500, "Server error. Please try again later."),
    ])
    @pytest.mark.asyncio
    async def test_status_messages(self, make_client, transport, notifier, status, message):
        transport.add_response("GET", "/patient/profile", status=status, repeat=True)
        client = make_client(retry=RetryConfig(max_attempts=0))

        with pytest.raises(ApiError):
            await client.get("/patient/profile")

        assert notifier.messages() == [message]

    @pytest.mark.asyncio
    async def test_circuit_open_is_a_warning(self, make_client, transport, notifier):
        client = make_client()
        for _ in range(client.config.retry.max_failures):
            client.breaker.record_failure()

        with pytest.raises(CircuitOpenError):
            await client.get("/patient/profile")

        assert transport.requests == []
        assert notifier.notifications[0].severity == Severity.WARNING

    @pytest.mark.asyncio
    async def test_success_message(self, make_client, transport, notifier):
        transport.add_response("PUT", "/patient/profile", data={})
        client = make_client()

        await client.put("/patient/profile", {}, success_message="Profile updated successfully.")

        assert notifier.notifications[0].severity == Severity.SUCCESS
        assert notifier.messages() == ["Profile updated successfully."]

    @pytest.mark.asyncio
    async def test_success_message_silenced(self, make_client, transport, notifier):
        transport.add_response("PUT", "/patient/profile", data={})
        client = make_client()

        await client.put("/patient/profile", {}, success_message="Saved", silent=True)

        assert notifier.messages() == []


class TestCancellation:
    """Test that cancelling a call leaves no trace."""

    @pytest.mark.asyncio
    async def test_cancel_during_backoff(self, transport, notifier, clock):
        blocked = asyncio.Event()

        async def never_wake(seconds):
            blocked.set()
            await asyncio.Event().wait()

        transport.add_response("GET", "/patient/profile", status=503, repeat=True)
        client = ResilientClient(ClientConfig(base_url="http://api.test"), transport=transport,
                                 notifier=notifier, clock=clock, sleep=never_wake)

        task = asyncio.create_task(client.get("/patient/profile"))
        await blocked.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(transport.requests) == 1
        assert client.breaker.failure_count == 0
        assert notifier.messages() == []

    @pytest.mark.asyncio
    async def test_cancel_in_flight_request(self, make_client, transport, notifier, sleep):
        started = asyncio.Event()

        async def hang(request):
            started.set()
            await asyncio.Event().wait()

        transport.add_handler("GET", "/patient/profile", hang)
        client = make_client()

        task = asyncio.create_task(client.get("/patient/profile"))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert sleep.delays == []
        assert client.breaker.failure_count == 0
        assert notifier.messages() == []


class TestUpload:
    """Test file uploads."""

    @pytest.mark.asyncio
    async def test_upload_reports_progress_and_uses_upload_timeout(self, make_client, transport):
        seen = []

        def capture(request):
            seen.append(request)
            return ApiResponse(200, {"fileId": 11})

        transport.add_handler("POST", "/files/upload", capture)
        client = make_client()
        progress = []

        result = await client.upload_file(
            "/files/upload",
            UploadFile("report.pdf", b"%PDF-1.4 test"),
            on_progress=progress.append,
        )

        assert result == {"fileId": 11}
        assert progress == [100]
        assert seen[0].timeout_ms == 120_000
        assert seen[0].upload.filename == "report.pdf"
        assert seen[0].idempotent is False

    @pytest.mark.asyncio
    async def test_upload_not_retried(self, make_client, transport):
        transport.add_response("POST", "/files/upload", status=503, repeat=True)
        client = make_client()

        with pytest.raises(ServerError):
            await client.upload_file("/files/upload", UploadFile("a.pdf", b"x"))

        assert len(transport.requests) == 1


class TestLifecycle:
    """Test construction and shutdown."""

    def test_new_validates_config(self, transport):
        with pytest.raises(ConfigurationError):
            ResilientClient.new(ClientConfig(base_url=""), transport=transport)

    def test_components_built_from_config(self, transport):
        config = ClientConfig(
            base_url="http://api.test",
            cache_ttl_ms=1000,
            retry=RetryConfig(max_attempts=2, max_failures=7, reset_timeout_ms=9000),
        )
        client = ResilientClient(config, transport=transport)

        assert client.breaker.options.max_failures == 7
        assert client.breaker.options.reset_timeout_ms == 9000
        assert client.retry_policy.max_attempts == 2
        assert client.cache.default_ttl_ms == 1000

    def test_default_transport(self):
        client = ResilientClient(ClientConfig(base_url="http://api.test", app_version="2.0.0"))

        assert isinstance(client.transport, AiohttpTransport)
        assert client.transport.headers["X-App-Version"] == "2.0.0"

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self, make_client, transport):
        async with make_client():
            pass

        assert transport.closed is True

    @pytest.mark.asyncio
    async def test_clients_do_not_share_state(self, transport):
        first = ResilientClient(ClientConfig(base_url="http://api.test"), transport=transport)
        second = ResilientClient(ClientConfig(base_url="http://api.test"), transport=transport)

        for _ in range(5):
            first.breaker.record_failure()

        assert first.breaker.is_open
        assert not second.breaker.is_open


class TestErrorPassThrough:
    """Test errors reaching the caller unchanged."""

    @pytest.mark.asyncio
    async def test_client_error_carries_status_and_body(self, make_client, transport):
        transport.add_response("POST", "/patient/applications", status=409, data={"message": "Already applied"})
        client = make_client()

        with pytest.raises(ClientError) as exc_info:
            await client.post("/patient/applications", {})

        assert exc_info.value.status == 409
        assert exc_info.value.message == "Already applied"
        assert exc_info.value.data == {"message": "Already applied"}
