"""Tag list <-> PostgreSQL TEXT[] adapter.

An empty tag list is stored as NULL and a NULL column reads back as an
empty list, so `[] -> NULL -> []` and `["a", "b"] -> {a,b} -> ["a", "b"]`.
"""

from collections.abc import Iterable

from sqlalchemy import Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.types import TypeDecorator


def encode_tags(tags: Iterable[str] | None) -> list[str] | None:
    """Encode tags for a TEXT[] column (empty/absent -> None)."""
    if tags is None:
        return None
    encoded = [str(tag) for tag in tags]
    return encoded or None


def decode_tags(value: Iterable[str] | None) -> list[str]:
    """Decode a TEXT[] column value (NULL/empty -> [])."""
    if value is None:
        return []
    return [str(tag) for tag in value]


class TagArray(TypeDecorator):
    """TEXT[] column that round-trips empty tag lists through NULL."""

    impl = ARRAY(Text)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return encode_tags(value)

    def process_result_value(self, value, dialect):
        return decode_tags(value)
