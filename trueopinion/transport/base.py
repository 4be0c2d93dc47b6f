"""
Transport boundary between the client and the network.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..core.types import ApiRequest, ApiResponse, ProgressCallback

logger = logging.getLogger(__name__)


class Transport(ABC):
    """
    Sends one HTTP request and returns the response.

    Implementations return an ``ApiResponse`` for every HTTP status and raise
    ``NetworkError`` / ``RequestTimeoutError`` only when no response arrived.
    Status classification is left to the client.
    """

    @abstractmethod
    async def send(self, request: ApiRequest) -> ApiResponse:
        """Send a request"""
        pass

    async def close(self) -> None:
        """Release network resources"""
        pass


def report_progress(callback: Optional[ProgressCallback], sent: int, total: int) -> None:
    """Report upload progress as a whole percentage; callback errors are logged."""
    if callback is None:
        return

    percent = 100 if total <= 0 else round(sent * 100 / total)
    try:
        callback(percent)
    except Exception as e:
        logger.error(f"Upload progress callback failed: {e}")
