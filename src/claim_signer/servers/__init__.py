from .apps import ClaimSignerServer, with_cors

__all__ = [
    "ClaimSignerServer",
    "with_cors",
]
