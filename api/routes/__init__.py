"""
API Routes Package.

Contains FastAPI route definitions for the bot control plane.
"""

from . import bot_routes, config_routes, system_routes

__all__ = ["bot_routes", "config_routes", "system_routes"]
