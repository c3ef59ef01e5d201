"""
Bot lifecycle API routes.

Provides endpoints for reading the engine status and issuing start, stop
and restart commands.
"""

from fastapi import APIRouter, HTTPException, Depends
import structlog

from api.routes.common import error_response
from api.services.bot_manager import BotManager, LifecycleCommand
from api.services.errors import ControlPlaneError

logger = structlog.get_logger(__name__)
router = APIRouter()


# Dependency injection placeholder - will be set by main.py
def get_bot_manager() -> BotManager:
    """Get bot manager dependency - will be overridden by main.py"""
    raise HTTPException(status_code=500, detail="Bot manager not available")


@router.get("/status", summary="Get bot status")
async def get_bot_status(bot_manager: BotManager = Depends(get_bot_manager)):
    """Get the last known engine status."""
    return {
        "success": True,
        "status": bot_manager.get_status().value,
        "busy": bot_manager.busy,
        "bot": bot_manager.state.to_dict()
    }


@router.post("/{command}", summary="Execute lifecycle command")
async def execute_command(
    command: LifecycleCommand,
    bot_manager: BotManager = Depends(get_bot_manager)
):
    """Start, stop or restart the engine."""
    try:
        status = await bot_manager.execute(command)
    except ControlPlaneError as e:
        logger.warning(f"Bot {command.value} failed: {e}")
        return error_response(e, status=bot_manager.get_status().value)

    return {
        "success": True,
        "status": status.value,
        "message": f"Bot {command.value} completed, status is {status.value}"
    }
