"""
Pytest configuration and shared fixtures for control plane tests.

This module provides a scriptable engine double and service fixtures.
"""

import asyncio
from typing import Dict, List, Optional

import pytest

from api.services.bot_manager import BotManager, BotState
from api.services.config_sync import ConfigSyncService
from api.services.engine_client import EngineClient
from api.services.errors import EngineUnavailable


class FakeEngineClient(EngineClient):
    """
    In-memory engine for testing.

    ``failures`` maps an operation name (get_config, submit_config, start,
    stop) to the exception it should raise. ``gates`` maps an operation to
    an asyncio.Event the call waits on before completing.
    """

    def __init__(self, config: str = "mode=live\n"):
        self.config = config
        self.failures: Dict[str, Exception] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[str] = []
        self.submitted: List[str] = []
        self.closed = False

    def fail(self, operation: str, error: Optional[Exception] = None) -> None:
        self.failures[operation] = error or EngineUnavailable(f"{operation} failed")

    def hold(self, operation: str) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[operation] = gate
        return gate

    async def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        gate = self.gates.get(operation)
        if gate is not None:
            await gate.wait()
        if operation in self.failures:
            raise self.failures[operation]

    async def get_config(self) -> str:
        await self._enter("get_config")
        return self.config

    async def submit_config(self, document: str) -> None:
        await self._enter("submit_config")
        self.submitted.append(document)
        self.config = document

    async def start(self) -> None:
        await self._enter("start")

    async def stop(self) -> None:
        await self._enter("stop")

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def engine():
    """Scriptable engine double."""
    return FakeEngineClient()


@pytest.fixture
def bot_manager(engine):
    """Bot manager with a short engine timeout."""
    return BotManager(engine, state=BotState(), call_timeout=1.0)


@pytest.fixture
def config_sync(engine):
    """Config sync service with a short engine timeout."""
    return ConfigSyncService(engine, call_timeout=1.0)
