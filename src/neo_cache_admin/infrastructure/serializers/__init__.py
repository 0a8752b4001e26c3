"""Cache value serializers."""

from .json_serializer import JSONCacheSerializer

__all__ = [
    "JSONCacheSerializer",
]
