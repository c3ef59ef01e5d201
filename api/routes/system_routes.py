"""
System status API routes.

Provides an overview of the control plane: engine status and
configuration sync state.
"""

import datetime
from fastapi import APIRouter, HTTPException, Depends

from api.services.bot_manager import BotManager
from api.services.config_sync import ConfigSyncService

router = APIRouter()


# Dependency injection placeholders - will be set by main.py
def get_bot_manager() -> BotManager:
    """Get bot manager dependency - will be overridden by main.py"""
    raise HTTPException(status_code=500, detail="Bot manager not available")

def get_config_sync() -> ConfigSyncService:
    """Get config sync dependency - will be overridden by main.py"""
    raise HTTPException(status_code=500, detail="Config sync service not available")


@router.get("/status", summary="Get system status")
async def get_system_status(
    bot_manager: BotManager = Depends(get_bot_manager),
    config_sync: ConfigSyncService = Depends(get_config_sync)
):
    """Get overall control plane status."""
    document = config_sync.get_document()

    return {
        "system": {
            "status": "operational",
            "timestamp": datetime.datetime.now().isoformat(),
            "version": "1.0.0"
        },
        "bot": {
            **bot_manager.state.to_dict(),
            "busy": bot_manager.busy
        },
        "config": {
            "fetched": document is not None,
            "provenance": document.provenance.value if document else None,
            "revision": document.revision if document else None,
            "saved_at": document.saved_at.isoformat() if document and document.saved_at else None,
            "busy": config_sync.busy
        }
    }
