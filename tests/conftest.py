"""
Shared fixtures for the True Opinion client tests.
"""

import asyncio
from typing import List, Optional

import pytest

from trueopinion.core.client import ResilientClient
from trueopinion.core.config import ClientConfig, RetryConfig
from trueopinion.notifications import MemoryNotifier
from trueopinion.token import MemoryTokenStore
from trueopinion.transport import MockTransport


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class RecordingSleep:
    """Backoff sleep that records the requested delays (ms) and returns at once."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(round(seconds * 1000))
        await asyncio.sleep(0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def transport():
    return MockTransport()


@pytest.fixture
def notifier():
    return MemoryNotifier()


@pytest.fixture
def make_client(transport, notifier, clock, sleep):
    """Build a client wired to the mock transport, fake clock and recording sleep."""

    def factory(config: Optional[ClientConfig] = None, token: Optional[str] = None,
                retry: Optional[RetryConfig] = None, **kwargs) -> ResilientClient:
        if config is None:
            config = ClientConfig(base_url="http://api.test", retry=retry or RetryConfig())
        kwargs.setdefault("token_store", MemoryTokenStore(token))
        return ResilientClient(
            config,
            transport=transport,
            notifier=notifier,
            clock=clock,
            sleep=sleep,
            **kwargs,
        )

    return factory
