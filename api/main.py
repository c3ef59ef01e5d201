#!/usr/bin/env python
"""
FastAPI backend for the bot control plane.

Provides REST API endpoints for the frontend to view and edit the engine
configuration and to start, stop and restart the engine.
"""

from typing import Dict, Any, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

from api.logging_config import configure_logging
from api.routes import bot_routes, config_routes, system_routes
from api.services.bot_manager import BotManager, BotState
from api.services.config_sync import ConfigSyncService
from api.services.engine_client import EngineClient, HttpEngineClient
from config.settings import load_config

logger = structlog.get_logger(__name__)


def create_app(
    config: Optional[Dict[str, Any]] = None,
    engine: Optional[EngineClient] = None
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Loaded configuration (default: load_config())
        engine: Engine client to use (default: HTTP client for engine.url)

    Returns:
        Configured application
    """
    config = config or load_config()
    configure_logging(config.get('logging'))

    engine_config = config.get('engine', {})
    call_timeout = float(engine_config.get('timeout_seconds', 10.0))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan context manager."""
        logger.info("Starting bot control plane API...")

        engine_client = engine or HttpEngineClient(
            engine_config.get('url', 'http://localhost:8080'),
            timeout_seconds=call_timeout
        )

        # Each service owns its own state
        bot_manager = BotManager(engine_client, state=BotState(), call_timeout=call_timeout)
        config_sync = ConfigSyncService(engine_client, call_timeout=call_timeout)

        app.dependency_overrides[bot_routes.get_bot_manager] = lambda: bot_manager
        app.dependency_overrides[config_routes.get_config_sync] = lambda: config_sync
        app.dependency_overrides[system_routes.get_bot_manager] = lambda: bot_manager
        app.dependency_overrides[system_routes.get_config_sync] = lambda: config_sync

        logger.info("Bot control plane API started successfully")
        try:
            yield
        finally:
            logger.info("Shutting down bot control plane API...")
            await engine_client.close()
            app.dependency_overrides.clear()
            logger.info("Bot control plane API shut down complete")

    app = FastAPI(
        title="Bot Control Plane API",
        description="REST API for managing the trading engine lifecycle and configuration",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get('api', {}).get('cors_origins', []),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(bot_routes.router, prefix="/api/bot", tags=["Bot"])
    app.include_router(config_routes.router, prefix="/api/config", tags=["Config"])
    app.include_router(system_routes.router, prefix="/api/system", tags=["System"])

    @app.get("/", summary="API root")
    async def read_root():
        """API root endpoint."""
        return {
            "message": "Bot Control Plane API",
            "version": "1.0.0",
            "docs_url": "/docs",
            "health_url": "/health"
        }

    @app.get("/health", summary="Health check")
    async def health_check():
        """Quick health check endpoint."""
        return {
            "status": "healthy",
            "service": "bot-control-plane-api"
        }

    return app


if __name__ == "__main__":
    import uvicorn

    # Development server
    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
