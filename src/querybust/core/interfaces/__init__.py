"""Core interfaces (Protocol classes) for querybust."""

from querybust.core.interfaces.cache_adapter import ICacheAdapter
from querybust.core.interfaces.serializer import ISerializer

__all__ = [
    "ICacheAdapter",
    "ISerializer",
]
