"""
Tests for the aiohttp transport against a local test server.
"""

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from trueopinion import ClientConfig, ResilientClient, RetryConfig, UploadFile
from trueopinion.core.types import ApiRequest
from trueopinion.errors import AuthExpiredError, NetworkError, RequestTimeoutError, ServerError
from trueopinion.notifications import MemoryNotifier
from trueopinion.token import MemoryTokenStore
from trueopinion.transport import AiohttpTransport


async def echo(request):
    body = await request.json() if request.can_read_body else None
    return web.json_response({
        "method": request.method,
        "query": dict(request.query),
        "headers": {k: v for k, v in request.headers.items() if k.startswith("X-")},
        "authorization": request.headers.get("Authorization"),
        "body": body,
    })


async def server_error(request):
    return web.json_response({"message": "boom"}, status=500)


async def plain_text(request):
    return web.Response(text="pong")


async def garbled(request):
    return web.Response(body=b"\xff\xfe\xfa bad", status=500, content_type="text/html", charset="utf-8")


async def slow(request):
    await asyncio.sleep(1)
    return web.json_response({})


async def upload(request):
    reader = await request.multipart()
    fields = {}
    file_size = 0
    filename = None
    async for part in reader:
        if part.filename:
            filename = part.filename
            file_size = len(await part.read())
        else:
            fields[part.name] = await part.text()
    return web.json_response({"filename": filename, "size": file_size, "fields": fields})


async def protected(request):
    if request.headers.get("Authorization") != "Bearer fresh":
        return web.json_response({"message": "Token expired"}, status=401)
    return web.json_response({"id": 1})


async def refresh(request):
    if request.headers.get("Authorization") == "Bearer stale":
        return web.json_response({"token": "fresh"})
    return web.json_response({"message": "Invalid token"}, status=401)


def build_app():
    app = web.Application()
    app.router.add_route("*", "/api/echo", echo)
    app.router.add_get("/api/error", server_error)
    app.router.add_get("/api/text", plain_text)
    app.router.add_get("/api/slow", slow)
    app.router.add_get("/api/garbled", garbled)
    app.router.add_post("/api/files/upload", upload)
    app.router.add_get("/api/patient/profile", protected)
    app.router.add_post("/api/auth/refresh", refresh)
    return app


@pytest.fixture
async def server():
    test_server = TestServer(build_app())
    await test_server.start_server()
    yield test_server
    await test_server.close()


@pytest.fixture
def base_url(server):
    return str(server.make_url("/api"))


class TestAiohttpTransport:
    """Test request encoding and response decoding."""

    @pytest.mark.asyncio
    async def test_json_request_and_response(self, base_url):
        transport = AiohttpTransport(base_url, headers={"X-App-Version": "1.0.0"})
        try:
            response = await transport.send(ApiRequest(
                "POST", "/echo",
                headers={"Authorization": "Bearer abc"},
                params={"page": 2, "active": True, "skip": None},
                body={"name": "Asha"},
            ))
        finally:
            await transport.close()

        assert response.status == 200
        assert response.data["method"] == "POST"
        assert response.data["query"] == {"page": "2", "active": "true"}
        assert response.data["headers"]["X-App-Version"] == "1.0.0"
        assert response.data["headers"]["X-Requested-With"] == "XMLHttpRequest"
        assert response.data["authorization"] == "Bearer abc"
        assert response.data["body"] == {"name": "Asha"}

    @pytest.mark.asyncio
    async def test_error_status_is_returned_not_raised(self, base_url):
        transport = AiohttpTransport(base_url)
        try:
            response = await transport.send(ApiRequest("GET", "/error"))
        finally:
            await transport.close()

        assert response.status == 500
        assert response.data == {"message": "boom"}

    @pytest.mark.asyncio
    async def test_text_body(self, base_url):
        transport = AiohttpTransport(base_url)
        try:
            response = await transport.send(ApiRequest("GET", "/text"))
        finally:
            await transport.close()

        assert response.data == "pong"

    @pytest.mark.asyncio
    async def test_undecodable_body_is_replaced(self, base_url):
        transport = AiohttpTransport(base_url)
        try:
            response = await transport.send(ApiRequest("GET", "/garbled"))
        finally:
            await transport.close()

        assert response.status == 500
        assert response.data.endswith(" bad")
        assert "\ufffd" in response.data

    @pytest.mark.asyncio
    async def test_timeout(self, base_url):
        transport = AiohttpTransport(base_url)
        try:
            with pytest.raises(RequestTimeoutError):
                await transport.send(ApiRequest("GET", "/slow", timeout_ms=50))
        finally:
            await transport.close()

    @pytest.mark.asyncio
    async def test_connection_refused(self, unused_tcp_port):
        transport = AiohttpTransport(f"http://127.0.0.1:{unused_tcp_port}/api")
        try:
            with pytest.raises(NetworkError):
                await transport.send(ApiRequest("GET", "/echo"))
        finally:
            await transport.close()

    @pytest.mark.asyncio
    async def test_multipart_upload_with_progress(self, base_url):
        transport = AiohttpTransport(base_url, upload_chunk_size=4)
        progress = []
        try:
            response = await transport.send(ApiRequest(
                "POST", "/files/upload",
                upload=UploadFile("scan.pdf", b"0123456789", fields={"userId": 7, "fileType": "REPORT"}),
                on_progress=progress.append,
            ))
        finally:
            await transport.close()

        assert response.data == {
            "filename": "scan.pdf",
            "size": 10,
            "fields": {"userId": "7", "fileType": "REPORT"},
        }
        assert progress == [40, 80, 100]


class TestClientOverHttp:
    """Test the full client over a real socket."""

    @pytest.mark.asyncio
    async def test_refresh_and_replay(self, base_url):
        config = ClientConfig(base_url=base_url, retry=RetryConfig(max_attempts=0))
        async with ResilientClient(config, token_store=MemoryTokenStore("stale"),
                                   notifier=MemoryNotifier()) as client:
            assert await client.get("/patient/profile") == {"id": 1}
            assert await client.token_store.get() == "fresh"

    @pytest.mark.asyncio
    async def test_failed_refresh_expires_session(self, base_url):
        config = ClientConfig(base_url=base_url, retry=RetryConfig(max_attempts=0))
        async with ResilientClient(config, token_store=MemoryTokenStore("revoked"),
                                   notifier=MemoryNotifier()) as client:
            with pytest.raises(AuthExpiredError):
                await client.get("/patient/profile")
            assert await client.token_store.get() is None

    @pytest.mark.asyncio
    async def test_undecodable_error_body_is_classified(self, base_url):
        config = ClientConfig(base_url=base_url, retry=RetryConfig(max_attempts=0))
        notifier = MemoryNotifier()
        async with ResilientClient(config, notifier=notifier) as client:
            with pytest.raises(ServerError) as exc_info:
                await client.get("/garbled")

            assert exc_info.value.status == 500
            assert client.breaker.stats.failure_count == 1
        assert notifier.messages() == ["Server error. Please try again later."]
