"""
API Services Package.

Contains the lifecycle and configuration services of the bot control plane.
"""

from .bot_manager import BotManager, BotState, BotStatus, LifecycleCommand
from .config_sync import ConfigSyncService, ConfigDocument, Provenance
from .engine_client import EngineClient, HttpEngineClient

__all__ = [
    "BotManager",
    "BotState",
    "BotStatus",
    "LifecycleCommand",
    "ConfigSyncService",
    "ConfigDocument",
    "Provenance",
    "EngineClient",
    "HttpEngineClient",
]
