"""
Medical document upload and lookup.
"""

import dataclasses
import mimetypes
import os
from typing import Any, Optional

import aiofiles

from ..common.messages import SUCCESS_MESSAGES
from ..common.utils import join_url
from ..core.types import ProgressCallback, UploadFile
from .base import BaseService
from .endpoints import FileEndpoints


async def load_upload(path: str, content_type: Optional[str] = None) -> UploadFile:
    """Read a local file into an ``UploadFile``, guessing its content type from the name."""
    async with aiofiles.open(path, "rb") as f:
        content = await f.read()

    filename = os.path.basename(path)
    if content_type is None:
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"

    return UploadFile(filename=filename, content=content, content_type=content_type)


class FileService(BaseService):
    """Uploads go through ``upload_file``: multipart, progress reporting, upload timeout, no retries."""

    async def upload(
        self,
        file: UploadFile,
        user_id: Any,
        file_type: str,
        application_id: Optional[Any] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Any:
        file = dataclasses.replace(file, fields={
            **file.fields,
            "userId": user_id,
            "fileType": file_type,
            "applicationId": application_id,
        })
        return await self.client.upload_file(
            FileEndpoints.UPLOAD,
            file,
            on_progress=on_progress,
            success_message=SUCCESS_MESSAGES.file_uploaded,
        )

    async def upload_path(self, path: str, user_id: Any, file_type: str,
                          application_id: Optional[Any] = None,
                          on_progress: Optional[ProgressCallback] = None) -> Any:
        file = await load_upload(path)
        return await self.upload(file, user_id, file_type, application_id, on_progress)

    async def get_info(self, file_id) -> Any:
        return await self.client.get(FileEndpoints.info(file_id), cache=True)

    async def get_by_application(self, application_id) -> Any:
        return await self.client.get(FileEndpoints.by_application(application_id))

    async def delete(self, file_id) -> Any:
        return await self.client.delete(FileEndpoints.delete(file_id))

    def download_url(self, file_id) -> str:
        return join_url(self.client.config.base_url, FileEndpoints.download(file_id))

    def preview_url(self, file_id) -> str:
        return join_url(self.client.config.base_url, FileEndpoints.preview(file_id))
