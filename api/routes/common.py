"""
Shared helpers for API routes.
"""

from typing import Any

from fastapi.responses import JSONResponse

from api.services.errors import ControlPlaneError


def error_response(error: ControlPlaneError, **extra: Any) -> JSONResponse:
    """Build the structured ``success: false`` response for a service error."""
    content = {
        "success": False,
        "error": error.message,
        "error_type": error.__class__.__name__,
        "error_code": error.error_code,
        **extra
    }
    return JSONResponse(status_code=error.http_status, content=content)
