"""Capabilities the order builder needs from a query object.

``hasorder.query.Query`` implements these; any other query builder can be
ordered by implementing them too. ``join_graph`` is the one place where the
builder looks into the relational engine: it must expose the joins exactly as
they will be emitted, aliases included.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable


class ColumnLike(Protocol):
    relation: Any
    """Table reference with ``name`` and ``sql_alias``."""
    name: str


class JoinConditionLike(Protocol):
    left: ColumnLike
    """Column of the joined table."""
    right: ColumnLike
    """Column of the table joined to."""


class JoinLike(Protocol):
    table: Any
    """Table reference with ``name`` and ``sql_alias``."""
    on: JoinConditionLike


class AssociationMetadata(Protocol):
    kind: Any
    """An ``AssociationKind``."""
    name: Optional[str]

    @property
    def table_name(self) -> str: ...

    @property
    def foreign_key(self) -> str: ...


@runtime_checkable
class OrderableQuery(Protocol):
    """Query object that can be joined and ordered."""

    @property
    def table_name(self) -> str: ...

    @property
    def join_graph(self) -> Sequence[JoinLike]: ...

    def reflect_on_association(self, name: str) -> Optional[AssociationMetadata]: ...

    def left_outer_joins(self, *names: str) -> "OrderableQuery": ...

    def order(self, *fragments: str) -> "OrderableQuery": ...

    def reorder(self, *fragments: str) -> "OrderableQuery": ...


__all__ = [
    "AssociationMetadata",
    "ColumnLike",
    "JoinConditionLike",
    "JoinLike",
    "OrderableQuery",
]
