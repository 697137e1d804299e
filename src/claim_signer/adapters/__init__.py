from .bases import ChainReader

__all__ = ["ChainReader"]
