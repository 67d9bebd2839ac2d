"""Parse client-supplied sort tokens such as ``-created_at`` or ``creator:nulls_first``."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

from .errors import ConfigurationError

NULLS_SEPARATOR = ":"
PATH_SEPARATOR = "."


class SortDirection(str, enum.Enum):
    """Direction of an ORDER BY term; the value is the SQL keyword."""

    ASCENDING = "asc"
    DESCENDING = "desc"


class NullsPolicy(str, enum.Enum):
    """Where NULL values go; ``UNSPECIFIED`` leaves it to the database."""

    UNSPECIFIED = "unspecified"
    NULLS_FIRST = "nulls_first"
    NULLS_LAST = "nulls_last"

    @property
    def sql(self) -> str:
        """``NULLS FIRST`` / ``NULLS LAST``, or an empty string when unspecified."""
        if self is NullsPolicy.NULLS_FIRST:
            return "NULLS FIRST"
        if self is NullsPolicy.NULLS_LAST:
            return "NULLS LAST"
        return ""


class ParsedSortKey(BaseModel):
    """A decoded sort token: direction, attribute and nulls placement."""

    model_config = {"frozen": True}

    direction: SortDirection = SortDirection.ASCENDING
    attribute: str = Field(min_length=1)
    nulls: NullsPolicy = NullsPolicy.UNSPECIFIED

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESCENDING


def key_direction(sort_key: str) -> tuple[SortDirection, str]:
    """Split the optional ``-`` / ``+`` prefix from a sort key."""
    if sort_key.startswith("-"):
        return SortDirection.DESCENDING, sort_key[1:]
    if sort_key.startswith("+"):
        return SortDirection.ASCENDING, sort_key[1:]
    return SortDirection.ASCENDING, sort_key


def parse_sort_key(sort_key: str) -> ParsedSortKey:
    """Decode a raw sort token.

    Examples:
        ``"-foo:nulls_first"`` -> descending, ``foo``, nulls first
        ``"+foo"`` -> ascending, ``foo``, unspecified
        ``"foo:whatever"`` -> ascending, ``foo``, nulls last

    Raises:
        ValueError: If the token has no column component (e.g. ``"-"``, ``":nulls_first"``).
    """
    direction, remainder = key_direction(str(sort_key).strip())
    # Anything after a second separator is ignored
    parts = remainder.split(NULLS_SEPARATOR)
    attribute = parts[0].strip()
    directive = parts[1] if len(parts) > 1 else ""
    if not attribute:
        raise ValueError(f"Sort key {sort_key!r} has no attribute")
    directive = directive.strip()
    if not directive:
        nulls = NullsPolicy.UNSPECIFIED
    elif directive == NullsPolicy.NULLS_FIRST.value:
        nulls = NullsPolicy.NULLS_FIRST
    else:
        nulls = NullsPolicy.NULLS_LAST
    return ParsedSortKey(direction=direction, attribute=attribute, nulls=nulls)


def split_attribute_path(attribute_path: str) -> tuple[str | None, str]:
    """Split ``association.column`` into ``(association, column)``; bare columns give ``(None, column)``.

    Only one level of association is supported; deeper paths raise ConfigurationError.
    """
    parts = str(attribute_path).split(PATH_SEPARATOR)
    if len(parts) == 1:
        return None, parts[0]
    if len(parts) > 2:
        raise ConfigurationError(
            f"Attribute path {attribute_path!r} is nested more than one association deep"
        )
    association, column = parts
    if not association or not column:
        raise ConfigurationError(f"Invalid attribute path: {attribute_path!r}")
    return association, column


__all__ = [
    "NullsPolicy",
    "ParsedSortKey",
    "SortDirection",
    "key_direction",
    "parse_sort_key",
    "split_attribute_path",
]
