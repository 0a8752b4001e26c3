"""JSON cache serializer.

ONLY JSON serialization - encodes values as UTF-8 JSON and decodes them
back, optionally validating into a requested type with pydantic.

Following maximum separation architecture - one file = one purpose.
"""

import json
from functools import lru_cache
from typing import Any, Optional, Type, Union

from pydantic import TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from ...core.exceptions.deserialization_error import DeserializationError


@lru_cache(maxsize=256)
def _type_adapter(value_type: Any) -> TypeAdapter:
    return TypeAdapter(value_type)


class JSONCacheSerializer:
    """JSON cache serializer with pydantic type validation.

    Features:
    - Extended type support on write (models, dataclasses, datetimes,
      UUIDs, decimals, sets) through pydantic's JSON-able conversion
    - Typed reads through ``pydantic.TypeAdapter``
    """

    def __init__(self, ensure_ascii: bool = False, sort_keys: bool = False):
        """Initialize JSON serializer.

        Args:
            ensure_ascii: If True, escape non-ASCII characters
            sort_keys: Sort dictionary keys
        """
        self._ensure_ascii = ensure_ascii
        self._sort_keys = sort_keys

    def serialize(self, value: Any) -> bytes:
        """Serialize value to JSON bytes."""
        encoded = json.dumps(
            value,
            default=to_jsonable_python,
            ensure_ascii=self._ensure_ascii,
            sort_keys=self._sort_keys,
            separators=(",", ":"),
        )
        return encoded.encode("utf-8")

    def deserialize(
        self,
        data: Union[bytes, str],
        value_type: Optional[Type[Any]] = None
    ) -> Any:
        """Deserialize JSON bytes, validating into ``value_type`` if given.

        Raises:
            DeserializationError: If data is not JSON or does not validate
        """
        raw = data if isinstance(data, bytes) else data.encode("utf-8")
        target_name = getattr(value_type, "__name__", repr(value_type)) if value_type else None

        try:
            decoded = json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DeserializationError(
                f"Invalid JSON data: {e}",
                data=raw,
                serializer_type=self.get_format_name(),
                original_error=e,
                target_type=target_name,
            ) from e

        if value_type is None:
            return decoded

        try:
            value = _type_adapter(value_type).validate_python(decoded)
        except ValidationError as e:
            raise DeserializationError(
                f"Data does not validate as {target_name}",
                data=raw,
                serializer_type=self.get_format_name(),
                original_error=e,
                target_type=target_name,
            ) from e

        return value

    def get_format_name(self) -> str:
        """Get serialization format name."""
        return "json"

