from .config import ClaimSignerSettings
from .logs import setup_logging
from .servers import ClaimSignerServer

__all__ = [
    "ClaimSignerSettings",
    "ClaimSignerServer",
    "setup_logging",
]
