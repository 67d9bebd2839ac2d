"""Join-graph nodes for FROM / JOIN clauses.

A ``Query`` keeps its joins as ``Join`` nodes. Each node records the table it
binds (with the alias the query chose for it) and its ``ON`` equality, so the
alias that a given association ended up with can be read back from the graph
rather than guessed from naming conventions.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel


class TableReference(BaseModel):
    """A table in FROM / JOIN position, optionally aliased."""

    model_config = {"frozen": True}

    name: str
    alias: Optional[str] = None

    @property
    def sql_alias(self) -> str:
        """Name that qualifies columns of this table (the alias when there is one)."""
        return self.alias or self.name

    @property
    def sql(self) -> str:
        """``name`` or ``name AS alias``."""
        if self.alias:
            return f"{self.name} AS {self.alias}"
        return self.name


class ColumnReference(BaseModel):
    """A column qualified by the table (or alias) it belongs to."""

    model_config = {"frozen": True}

    relation: TableReference
    name: str

    @property
    def sql(self) -> str:
        """Qualified column (e.g. ``users.id``)."""
        return f"{self.relation.sql_alias}.{self.name}"


class Equality(BaseModel):
    """``left = right`` between two columns.

    In join conditions ``left`` is a column of the joined table and ``right``
    a column of the table it is joined to.
    """

    model_config = {"frozen": True}

    left: ColumnReference
    right: ColumnReference

    @property
    def sql(self) -> str:
        return f"{self.left.sql} = {self.right.sql}"


class JoinKind(str, enum.Enum):
    """Join flavours; the value is the SQL keyword."""

    INNER = "INNER JOIN"
    LEFT_OUTER = "LEFT OUTER JOIN"


class Join(BaseModel):
    """One join clause produced for an association."""

    model_config = {"frozen": True}

    association: str
    """Name of the association this join was built for."""
    kind: JoinKind = JoinKind.LEFT_OUTER
    table: TableReference
    on: Equality

    @property
    def sql(self) -> str:
        """e.g. ``LEFT OUTER JOIN users ON users.id = posts.creator_id``."""
        return f"{self.kind.value} {self.table.sql} ON {self.on.sql}"


__all__ = [
    "ColumnReference",
    "Equality",
    "Join",
    "JoinKind",
    "TableReference",
]
