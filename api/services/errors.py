"""
Error taxonomy for the bot control plane.

Every failure talking to the engine is classified into one of these
exceptions at the service boundary so that routes can report which kind
of problem occurred instead of surfacing raw transport errors.
"""

import time
from typing import Optional, Dict, Any


class ControlPlaneError(Exception):
    """
    Base exception class for all control plane errors.
    """

    error_code = "CONTROL_PLANE_ERROR"
    http_status = 500

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.timestamp = time.time()

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception to a dictionary representation."""
        return {
            "message": self.message,
            "error_code": self.error_code,
            "error_type": self.__class__.__name__,
            "context": self.context,
            "timestamp": self.timestamp
        }


class EngineUnavailable(ControlPlaneError):
    """
    The remote engine could not be reached or did not answer in time.

    Recoverable: the operator may retry.
    """

    error_code = "ENGINE_UNAVAILABLE"
    http_status = 503


class ValidationRejected(ControlPlaneError):
    """
    The engine rejected a submitted configuration document.

    Not retryable without changing the content.
    """

    error_code = "VALIDATION_REJECTED"
    http_status = 422


class InvalidTransition(ControlPlaneError):
    """Command is not legal from the current state."""

    error_code = "INVALID_TRANSITION"
    http_status = 409


class OperationInProgress(InvalidTransition):
    """Another operation of the same component is still in flight."""

    error_code = "OPERATION_IN_PROGRESS"


class NoBaseline(ControlPlaneError):
    """Draft operation attempted before any successful fetch."""

    error_code = "NO_BASELINE"
    http_status = 409


class StaleBaseline(ControlPlaneError):
    """Draft was derived from a baseline that has since been replaced."""

    error_code = "STALE_BASELINE"
    http_status = 409
