"""Infrastructure layer implementations for querybust."""

from querybust.infrastructure.adapters import InMemoryQueryCache
from querybust.infrastructure.serializers import JsonSerializer, SerializationError

__all__ = [
    "InMemoryQueryCache",
    "JsonSerializer",
    "SerializationError",
]
