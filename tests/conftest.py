"""Pytest configuration for the remote tests."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
if str(PACKAGE_ROOT) not in sys.path:
    sys.path.insert(0, str(PACKAGE_ROOT))

from atvremote.config.settings import RemoteConfig  # noqa: E402
from atvremote.events import EventBus  # noqa: E402
from atvremote.remote import Remote  # noqa: E402
from atvremote.services.session import SessionManager  # noqa: E402

from mocks import TEST_IP, FakeSessionHandle  # noqa: E402


@pytest.fixture(autouse=True)
def reset_logging_handlers():
    """Close handlers installed by configure_logging() so tests stay isolated."""
    yield
    logger = logging.getLogger("atvremote")
    for handler in logger.handlers[:]:
        try:
            handler.close()
        except (OSError, RuntimeError):
            pass
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ATVREMOTE_* variables from the developer shell out of config loading."""
    import os

    for key in list(os.environ):
        if key.startswith("ATVREMOTE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def remote_config() -> RemoteConfig:
    # Long timer intervals keep background ticks out of call counters.
    return RemoteConfig(
        ip=TEST_IP,
        heartbeat_interval=60000,
        connection_check_interval=60000,
        connect_timeout=1000,
        init_timeout=500,
    )


@pytest.fixture()
def handle() -> FakeSessionHandle:
    return FakeSessionHandle()


@pytest.fixture()
def bus() -> EventBus:
    return EventBus(quiet=False)


@pytest_asyncio.fixture
async def session(
    remote_config: RemoteConfig,
    handle: FakeSessionHandle,
    bus: EventBus,
) -> AsyncIterator[SessionManager]:
    manager = SessionManager(remote_config, handle, bus)
    yield manager
    manager.mark_lost()
    await manager.tracker.drain()
    await asyncio.sleep(0)


@pytest_asyncio.fixture
async def remote(remote_config: RemoteConfig, handle: FakeSessionHandle) -> AsyncIterator[Remote]:
    instance = Remote(remote_config, handle=handle)
    yield instance
    instance.session.mark_lost()
    await instance.session.tracker.drain()
    await asyncio.sleep(0)
