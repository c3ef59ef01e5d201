"""
Bot Control Plane API Package.

This package provides the FastAPI backend for the bot control plane,
including REST endpoints for the engine lifecycle and configuration.
"""

__version__ = "1.0.0"
__author__ = "Trading Bot System"
