"""
Logging configuration for the claim signer.

Every module logs through ``logging.getLogger(__name__)`` under the
``claim_signer`` namespace; ``setup_logging`` wires those loggers to the
console for a hosted deployment.
"""

import copy
import logging
import logging.config
from typing import Optional


DEFAULT_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "detailed": {
            "format": (
                "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d "
                "- %(message)s (%(funcName)s)"
            ),
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "standard",
            "stream": "ext://sys.stdout"
        },
    },
    "loggers": {
        "claim_signer": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False
        }
    },
    "root": {
        "level": "WARNING",
        "handlers": ["console"]
    }
}


def setup_logging(level: Optional[str] = None, detailed: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        level: Log level for ``claim_signer`` loggers (DEBUG, INFO, WARNING, ERROR)
        detailed: Include line numbers and function names
    """
    config = copy.deepcopy(DEFAULT_LOGGING_CONFIG)

    if level:
        config["loggers"]["claim_signer"]["level"] = level.upper()

    if detailed:
        config["handlers"]["console"]["formatter"] = "detailed"

    logging.config.dictConfig(config)
