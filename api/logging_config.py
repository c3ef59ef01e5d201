"""
Logging setup for the bot control plane.

structlog on top of the standard library logging module.
"""

import logging
from typing import Dict, Any, Optional

import structlog


def configure_logging(settings: Optional[Dict[str, Any]] = None) -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        settings: The ``logging`` section of the loaded configuration
    """
    settings = settings or {}
    level = getattr(logging, str(settings.get('level', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.get('json', True)
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
