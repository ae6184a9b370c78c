"""Serializers for out-of-process query caches."""

from querybust.infrastructure.serializers.json import JsonSerializer, SerializationError

__all__ = ["JsonSerializer", "SerializationError"]
