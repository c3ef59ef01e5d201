"""
Bot Manager service for controlling the trading engine lifecycle.

Handles starting, stopping and restarting the remote engine and keeps the
status the operator is shown. Commands are serialized: while one command
is in flight any other is rejected instead of queued.
"""

import asyncio
from typing import Dict, Any, Optional
from datetime import datetime
from enum import Enum
import structlog

from api.services.engine_client import EngineClient, call_engine
from api.services.errors import (
    ControlPlaneError,
    InvalidTransition,
    OperationInProgress,
)

logger = structlog.get_logger(__name__)


class BotStatus(str, Enum):
    """Engine status as believed by the control plane."""
    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


class LifecycleCommand(str, Enum):
    """Operator lifecycle command."""
    START = "start"
    STOP = "stop"
    RESTART = "restart"


class BotState:
    """Status of the engine owned by a single BotManager."""

    def __init__(self, status: BotStatus = BotStatus.IDLE):
        self.status = status
        self.last_command: Optional[LifecycleCommand] = None
        self.last_error: Optional[str] = None
        self.updated_at: datetime = datetime.now()
        self.started_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "status": self.status.value,
            "last_command": self.last_command.value if self.last_command else None,
            "last_error": self.last_error,
            "updated_at": self.updated_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "uptime_seconds": (
                (datetime.now() - self.started_at).total_seconds()
                if self.started_at and self.status == BotStatus.RUNNING
                else None
            )
        }


class BotManager:
    """
    Lifecycle controller for the remote engine.

    Only one ``execute`` call may run at a time; a second call made while
    one is outstanding fails with ``OperationInProgress``.
    """

    def __init__(
        self,
        engine: EngineClient,
        state: Optional[BotState] = None,
        call_timeout: float = 10.0
    ):
        self.engine = engine
        self.state = state or BotState()
        self.call_timeout = call_timeout
        self.logger = logger.bind(component="BotManager")

        # Command currently in flight
        self._in_flight: Optional[LifecycleCommand] = None

    def get_status(self) -> BotStatus:
        """Get the last known engine status."""
        return self.state.status

    @property
    def busy(self) -> bool:
        """True while a lifecycle command is in flight."""
        return self._in_flight is not None

    async def execute(self, command: LifecycleCommand) -> BotStatus:
        """
        Execute a lifecycle command against the engine.

        Args:
            command: Command to execute

        Returns:
            Resulting status

        Raises:
            EngineUnavailable: the engine call failed; status was rolled back
            InvalidTransition: command not legal from the current status
            OperationInProgress: another command is still in flight
        """
        command = LifecycleCommand(command)

        if self._in_flight is not None:
            raise OperationInProgress(
                f"Cannot {command.value}: {self._in_flight.value} is in progress "
                f"(status: {self.state.status.value})",
                context={
                    "command": command.value,
                    "in_progress": self._in_flight.value,
                    "status": self.state.status.value
                }
            )

        self._in_flight = command
        self.state.last_command = command
        self.logger.info(f"Executing {command.value} (status: {self.state.status.value})")
        try:
            if command is LifecycleCommand.START:
                return await self._start()
            if command is LifecycleCommand.STOP:
                return await self._stop()
            return await self._restart()
        finally:
            self._in_flight = None

    def _transition(self, status: BotStatus, error: Optional[Exception] = None) -> None:
        previous = self.state.status
        self.state.status = status
        self.state.updated_at = datetime.now()
        self.state.last_error = str(error) if error else None

        if status is BotStatus.RUNNING and previous is not BotStatus.RUNNING:
            self.state.started_at = self.state.updated_at
        elif status is BotStatus.IDLE:
            self.state.started_at = None

        if error:
            self.logger.warning(f"Bot status rolled back: {previous.value} -> {status.value}: {error}")
        else:
            self.logger.info(f"Bot status changed: {previous.value} -> {status.value}")

    def _reject(self, command: LifecycleCommand, reason: str) -> InvalidTransition:
        return InvalidTransition(
            f"Cannot {command.value}: {reason}",
            context={"command": command.value, "status": self.state.status.value}
        )

    async def _start(self) -> BotStatus:
        status = self.state.status
        if status is BotStatus.RUNNING:
            raise self._reject(LifecycleCommand.START, "bot is already running")
        if status is not BotStatus.IDLE:
            raise self._reject(LifecycleCommand.START, f"bot is {status.value}")

        self._transition(BotStatus.STARTING)
        try:
            await call_engine(self.engine.start, "start", self.call_timeout)
        except ControlPlaneError as e:
            self._transition(BotStatus.IDLE, error=e)
            raise
        except asyncio.CancelledError:
            self._transition(BotStatus.IDLE)
            raise

        self._transition(BotStatus.RUNNING)
        return self.state.status

    async def _stop(self) -> BotStatus:
        status = self.state.status
        if status is BotStatus.STOPPING:
            raise self._reject(LifecycleCommand.STOP, "bot is already stopping")
        if status is not BotStatus.RUNNING:
            raise self._reject(LifecycleCommand.STOP, f"bot is {status.value}")

        self._transition(BotStatus.STOPPING)
        try:
            await call_engine(self.engine.stop, "stop", self.call_timeout)
        except ControlPlaneError as e:
            self._transition(BotStatus.RUNNING, error=e)
            raise
        except asyncio.CancelledError:
            self._transition(BotStatus.RUNNING)
            raise

        self._transition(BotStatus.IDLE)
        return self.state.status

    async def _restart(self) -> BotStatus:
        status = self.state.status
        if status is BotStatus.RUNNING:
            # A failed stop propagates and start is never attempted
            await self._stop()
        elif status is not BotStatus.IDLE:
            raise self._reject(LifecycleCommand.RESTART, f"bot is {status.value}")

        return await self._start()
