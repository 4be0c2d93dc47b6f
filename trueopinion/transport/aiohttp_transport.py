"""
aiohttp-based transport for the True Opinion REST API.
"""

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Dict, Optional

import aiohttp

from ..common.utils import join_url
from ..core.types import ApiRequest, ApiResponse, ProgressCallback, UploadFile
from ..errors import NetworkError, RequestTimeoutError
from .base import Transport, report_progress

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    'Accept': 'application/json',
    'X-Requested-With': 'XMLHttpRequest',
}


def _clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, str]]:
    if not params:
        return None

    cleaned = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = str(value)
    return cleaned


class AiohttpTransport(Transport):
    """
    Transport that owns one ``aiohttp.ClientSession``.

    The session is created lazily on the first request so the transport can
    be constructed outside a running event loop.
    """

    def __init__(
        self,
        base_url: str,
        timeout_ms: int = 30_000,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[aiohttp.ClientSession] = None,
        upload_chunk_size: int = 64 * 1024,
    ):
        self.base_url = base_url
        self.timeout_ms = timeout_ms
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}
        self.upload_chunk_size = upload_chunk_size
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self.headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_ms / 1000),
            )
            self._owns_session = True
        return self._session

    async def send(self, request: ApiRequest) -> ApiResponse:
        session = self._get_session()
        url = join_url(self.base_url, request.url)

        kwargs: Dict[str, Any] = {
            "headers": request.headers,
            "params": _clean_params(request.params),
        }
        if request.timeout_ms:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=request.timeout_ms / 1000)

        if request.upload is not None:
            kwargs["data"] = self._multipart(request.upload, request.on_progress)
        elif request.body is not None:
            kwargs["json"] = request.body

        logger.debug(f"Sending {request.describe()}")

        try:
            async with session.request(request.method, url, **kwargs) as resp:
                data = await self._read_body(resp)
                return ApiResponse(status=resp.status, data=data, headers=dict(resp.headers))
        except asyncio.TimeoutError as e:
            raise RequestTimeoutError(cause=e) from e
        except aiohttp.ClientError as e:
            raise NetworkError(cause=e) from e

    @staticmethod
    async def _read_body(resp: aiohttp.ClientResponse) -> Any:
        text = await resp.text(errors="replace")
        if not text:
            return None
        if "json" in (resp.content_type or ""):
            try:
                return json.loads(text)
            except ValueError:
                logger.warning(f"Response declared JSON but could not be decoded ({resp.status})")
        return text

    def _multipart(self, upload: UploadFile, on_progress: Optional[ProgressCallback]) -> aiohttp.FormData:
        form = aiohttp.FormData()
        for name, value in upload.fields.items():
            if value is not None:
                form.add_field(name, str(value))
        form.add_field(
            upload.field_name,
            self._iter_chunks(upload, on_progress),
            filename=upload.filename,
            content_type=upload.content_type,
        )
        return form

    async def _iter_chunks(self, upload: UploadFile, on_progress: Optional[ProgressCallback]) -> AsyncIterator[bytes]:
        total = upload.size
        if total == 0:
            report_progress(on_progress, 0, 0)
            return

        sent = 0
        for start in range(0, total, self.upload_chunk_size):
            chunk = upload.content[start:start + self.upload_chunk_size]
            yield chunk
            sent += len(chunk)
            report_progress(on_progress, sent, total)

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.debug("Closed HTTP session")
