"""
Configuration settings for the bot control plane.

Handles loading configuration from files and environment variables.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
import structlog

logger = structlog.get_logger(__name__)

# Default configuration file path
DEFAULT_CONFIG_PATH = os.path.join(Path(__file__).parent, "config.json")


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from file and environment variables.

    Args:
        config_path: Path to configuration file (default: BOT_CONTROL_CONFIG
            or config/config.json)

    Returns:
        Dictionary with configuration settings
    """
    config_path = config_path or os.environ.get('BOT_CONTROL_CONFIG') or DEFAULT_CONFIG_PATH

    # Default configuration
    config = {
        'engine': {
            'url': os.environ.get('ENGINE_URL', 'http://localhost:8080'),
            'timeout_seconds': _env_float('ENGINE_TIMEOUT_SECONDS', 10.0)
        },
        'api': {
            'host': os.environ.get('API_HOST', '0.0.0.0'),
            'port': _env_int('API_PORT', 8000),
            'cors_origins': ['http://localhost:3000', 'http://127.0.0.1:3000']
        },
        'logging': {
            'level': os.environ.get('LOG_LEVEL', 'INFO'),
            'json': os.environ.get('LOG_JSON', 'true').lower() in ('1', 'true', 'yes')
        }
    }

    # Load configuration from file if exists
    try:
        if os.path.exists(config_path):
            with open(config_path, 'r') as f:
                file_config = json.load(f)

                if isinstance(file_config, dict):
                    # Update config with file values
                    _deep_update(config, file_config)
                else:
                    logger.warning(f"Ignoring configuration file {config_path}: top level is not an object")

            logger.info(f"Loaded configuration from {config_path}")
        else:
            logger.debug(f"Configuration file {config_path} not found, using defaults")

    except (OSError, ValueError) as e:
        logger.error(f"Error loading configuration file: {e}")

    return config


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


def _deep_update(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep update target dictionary with values from source.

    Args:
        target: Target dictionary to update
        source: Source dictionary with values

    Returns:
        Updated target dictionary
    """
    for key, value in source.items():
        if key in target and isinstance(target[key], dict) and isinstance(value, dict):
            _deep_update(target[key], value)
        else:
            target[key] = value

    return target
