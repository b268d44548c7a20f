"""Logging configuration for the Reminder Extraction Engine application.
"""

import logging
from typing import Any, Dict, Union

# Define logging format
LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

def _resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO

def build_logging_config(level: Union[str, int] = logging.INFO) -> Dict[str, Any]:
    """Builds a dictConfig-compatible logging configuration.

    Args:
        level: Root log level, as a name ("DEBUG") or a logging constant.

    Returns:
        A dictionary suitable for logging.config.dictConfig and uvicorn's log_config.
    """
    log_level = _resolve_level(level)
    return {
        "version": 1,
        "disable_existing_loggers": False, # Keep existing loggers (e.g., uvicorn)
        "formatters": {
            "default": {
                "format": LOG_FORMAT,
                "datefmt": DATE_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "level": log_level,
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout", # Redirect to stdout
            },
        },
        "loggers": {
            # Root logger configuration
            "": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": True,
            },
            "uvicorn.error": {
                "level": logging.INFO,
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn.access": {
                "level": logging.WARNING, # Reduce verbosity of access logs
                "handlers": ["console"],
                "propagate": False,
            },
            "httpx": {
                "level": logging.WARNING,
                "handlers": ["console"],
                "propagate": False,
            },
            "openai": {
                "level": logging.WARNING,
                "handlers": ["console"],
                "propagate": False,
            },
        }
    }

LOGGING_CONFIG = build_logging_config(logging.INFO)
