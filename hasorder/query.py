"""Query builder for Table schemas.

This module provides an immutable, fluent Query that accumulates JOINs over
declared associations and ORDER BY fragments, and compiles them to SQL. Every
builder method returns a new Query, so a query shared between requests is
never mutated. Execution is left to the caller; ``sql`` is the product.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from .table import Association, AssociationKind, Table
from .expressions import (
    ColumnReference,
    Equality,
    Join,
    JoinKind,
    TableReference,
)

logger = logging.getLogger("hasorder")


class Query(BaseModel):
    """Fluent query builder for a Table: SELECT, JOINs and ORDER BY.

    State is join clauses (in the order they were added) and order fragments
    (raw SQL, e.g. ``users.last_name desc NULLS LAST``).
    """

    model_config = {"arbitrary_types_allowed": True}

    table: type[Table]
    """The Table schema this query targets."""
    join_clauses: list[Join] = Field(default_factory=list)
    """Joins over the table's associations, in insertion order."""
    order_clauses: list[str] = Field(default_factory=list)
    """ORDER BY fragments. Empty means unordered."""

    def clone_query_with(self, **changes) -> Query:
        """Return a new Query with the same state except for the given overrides.

        Args:
            **changes: Field names and values to set on the clone (e.g. order_clauses=[...]).

        Returns:
            A new Query instance.
        """
        d = {
            "table": self.table,
            "join_clauses": list(self.join_clauses),
            "order_clauses": list(self.order_clauses),
        }
        for k, v in changes.items():
            if k in d:
                d[k] = v
        return type(self)(**d)

    @property
    def table_name(self) -> str:
        """SQL name of the root table."""
        return self.table._get_table_name()

    @property
    def root_reference(self) -> TableReference:
        return TableReference(name=self.table_name)

    @property
    def join_graph(self) -> tuple[Join, ...]:
        """Join clauses as the query will emit them."""
        return tuple(self.join_clauses)

    def reflect_on_association(self, name: str) -> Optional[Association]:
        """Association metadata of the root table, or None when it declares no such association."""
        return self.table.reflect_on_association(name)

    def _bound_names(self) -> set[str]:
        """Table names and aliases already in use in FROM / JOIN."""
        return {self.table_name} | {join.table.sql_alias for join in self.join_clauses}

    def _table_reference_for(self, association: Association) -> TableReference:
        """Reference for a new join: the bare table name, or an alias when it is already bound."""
        bound = self._bound_names()
        if association.table_name not in bound:
            return TableReference(name=association.table_name)
        alias = f"{association.name}_{self.table_name}"
        candidate, counter = alias, 2
        while candidate in bound:
            candidate = f"{alias}_{counter}"
            counter += 1
        return TableReference(name=association.table_name, alias=candidate)

    def _build_join(self, association: Association, kind: JoinKind) -> Join:
        """Build the join clause for an association of the root table."""
        joined = self._table_reference_for(association)
        owner = self.root_reference
        if association.kind is AssociationKind.BELONGS_TO:
            on = Equality(
                left=ColumnReference(relation=joined, name=association.target_table._get_primary_key()),
                right=ColumnReference(relation=owner, name=association.foreign_key),
            )
        else:
            on = Equality(
                left=ColumnReference(relation=joined, name=association.foreign_key),
                right=ColumnReference(relation=owner, name=self.table._get_primary_key()),
            )
        return Join(association=association.name, kind=kind, table=joined, on=on)

    def _add_joins(self, names: Iterable[str], kind: JoinKind) -> Query:
        join_clauses = list(self.join_clauses)
        q = self
        for name in names:
            if any(join.association == name for join in join_clauses):
                continue
            try:
                association = self.table._get_association(name)
            except KeyError as error:
                raise ValueError(str(error.args[0])) from error
            join = q._build_join(association, kind)
            logger.debug("%s %s for %s.%s", kind.value, join.table.sql, self.table_name, name)
            join_clauses.append(join)
            q = q.clone_query_with(join_clauses=join_clauses)
        return q

    def left_outer_joins(self, *names: str) -> Query:
        """LEFT OUTER JOIN the given associations. Associations already joined are not joined again."""
        return self._add_joins(names, JoinKind.LEFT_OUTER)

    def joins(self, *names: str) -> Query:
        """INNER JOIN the given associations. Associations already joined are not joined again."""
        return self._add_joins(names, JoinKind.INNER)

    def order(self, *fragments: str) -> Query:
        """Append ORDER BY fragments after any existing ones."""
        fragments = [f for f in fragments if f]
        return self.clone_query_with(order_clauses=self.order_clauses + fragments)

    def reorder(self, *fragments: str) -> Query:
        """Replace the ORDER BY fragments."""
        return self.clone_query_with(order_clauses=[f for f in fragments if f])

    # --- SQL-generating methods (sql_*) ---

    @property
    def sql_order(self) -> str:
        """ORDER BY body (without the keyword), or an empty string."""
        return ", ".join(self.order_clauses)

    @property
    def sql_from_join(self) -> str:
        """FROM clause followed by one line per join."""
        lines = [f"FROM {self.table_name}"]
        lines.extend(join.sql for join in self.join_clauses)
        return "\n".join(lines)

    @property
    def sql(self) -> str:
        """Return the compiled SQL string for this query."""
        sql = f"SELECT {self.table_name}.*\n{self.sql_from_join}"
        if self.order_clauses:
            sql += "\nORDER BY " + self.sql_order
        return sql


__all__ = ["Query"]
