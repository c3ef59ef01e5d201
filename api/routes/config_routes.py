"""
Engine configuration API routes.

Provides endpoints for reading the engine configuration, editing the draft
and saving it back to the engine.
"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
import structlog

from api.routes.common import error_response
from api.services.config_sync import ConfigSyncService
from api.services.errors import ControlPlaneError, NoBaseline

logger = structlog.get_logger(__name__)
router = APIRouter()


class ConfigBody(BaseModel):
    """Request model carrying a full configuration document."""
    config: str = Field(..., description="Full configuration document")
    base_revision: Optional[int] = Field(
        default=None,
        description="Baseline revision the document was edited against"
    )


# Dependency injection placeholder - will be set by main.py
def get_config_sync() -> ConfigSyncService:
    """Get config sync dependency - will be overridden by main.py"""
    raise HTTPException(status_code=500, detail="Config sync service not available")


@router.get("", summary="Fetch engine configuration")
async def get_config(config_sync: ConfigSyncService = Depends(get_config_sync)):
    """Fetch the active configuration from the engine."""
    try:
        document = await config_sync.fetch_config()
    except ControlPlaneError as e:
        logger.error(f"Failed to fetch config from engine: {e}")
        return error_response(e)

    return {
        "success": True,
        "config": document.baseline,
        "provenance": document.provenance.value,
        "revision": document.revision
    }


@router.post("", summary="Save engine configuration")
async def update_config(
    request: ConfigBody,
    config_sync: ConfigSyncService = Depends(get_config_sync)
):
    """Replace the draft with the given document and submit it to the engine."""
    try:
        document = await config_sync.submit_config(request.config, base_revision=request.base_revision)
    except ControlPlaneError as e:
        logger.warning(f"Failed to update configuration: {e}")
        return error_response(e)

    return {
        "success": True,
        "message": "Configuration saved successfully",
        "revision": document.revision
    }


@router.get("/draft", summary="Get configuration draft")
async def get_draft(config_sync: ConfigSyncService = Depends(get_config_sync)):
    """Get the current baseline, draft and provenance without contacting the engine."""
    document = config_sync.get_document()
    if document is None:
        return error_response(NoBaseline("Configuration has not been fetched from the engine yet"))

    return {"success": True, "document": document.to_dict()}


@router.put("/draft", summary="Edit configuration draft")
async def edit_draft(
    request: ConfigBody,
    config_sync: ConfigSyncService = Depends(get_config_sync)
):
    """Replace the draft locally."""
    try:
        document = config_sync.edit_draft(request.config, base_revision=request.base_revision)
    except ControlPlaneError as e:
        return error_response(e)

    return {"success": True, "document": document.to_dict()}


@router.post("/draft/reset", summary="Reset configuration draft")
async def reset_draft(config_sync: ConfigSyncService = Depends(get_config_sync)):
    """Discard local edits and restore the draft to the baseline."""
    try:
        document = config_sync.reset_draft()
    except ControlPlaneError as e:
        return error_response(e)

    return {"success": True, "document": document.to_dict()}


@router.post("/save", summary="Save configuration draft")
async def save_draft(config_sync: ConfigSyncService = Depends(get_config_sync)):
    """Submit the current draft to the engine."""
    try:
        document = await config_sync.save_config()
    except ControlPlaneError as e:
        logger.warning(f"Failed to save configuration draft: {e}")
        return error_response(e)

    return {
        "success": True,
        "message": "Configuration saved successfully",
        "document": document.to_dict()
    }
