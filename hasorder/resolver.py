"""Find the table name or alias an association was joined under.

Query engines alias a table when it is joined more than once (self-joins, or
two associations targeting the same table), so the name to qualify a column
with must be read back from the join the query actually contains.
"""

from __future__ import annotations

import logging

from .errors import ConfigurationError, ResolutionError
from .protocol import AssociationMetadata, JoinLike, OrderableQuery
from .table import AssociationKind

logger = logging.getLogger("hasorder")


def _join_matches(join: JoinLike, association: AssociationMetadata,
                  kind: AssociationKind, owner_name: str) -> bool:
    """True if join binds the association's target table through its foreign key."""
    if join.table.name != association.table_name:
        return False
    joined, other = join.on.left, join.on.right
    if joined.relation.sql_alias != join.table.sql_alias:
        return False
    if kind is AssociationKind.BELONGS_TO:
        # owner.fk = target.pk
        return other.name == association.foreign_key and other.relation.sql_alias == owner_name
    # target.fk = owner.pk
    return joined.name == association.foreign_key and other.relation.sql_alias == owner_name


def _to_one_kind(association: AssociationMetadata) -> AssociationKind:
    """The association's kind as an AssociationKind; raises unless it is belongs_to or has_one."""
    try:
        kind = AssociationKind(association.kind)
    except ValueError:
        kind = None
    if kind not in (AssociationKind.BELONGS_TO, AssociationKind.HAS_ONE):
        raise ConfigurationError(
            f"Association {association.name!r} must be has_one or belongs_to to be ordered on, "
            f"not {getattr(association.kind, 'value', association.kind)}"
        )
    return kind


def generate_table_alias(query: OrderableQuery, association: AssociationMetadata) -> str:
    """Return the table name or alias bound to the join of a to-one association.

    Example:
        q = Experience.q().left_outer_joins("start_date", "end_date")
        generate_table_alias(q, Experience.start_date)  #=> "dates"
        generate_table_alias(q, Experience.end_date)    #=> "end_date_experiences"

    Raises:
        ConfigurationError: If the association is not belongs_to / has_one.
        ResolutionError: If no join in the query matches the association.
    """
    kind = _to_one_kind(association)
    # Only root level joins are supported, so the owner is always the query's table
    for join in query.join_graph:
        if _join_matches(join, association, kind, query.table_name):
            return join.table.sql_alias
    raise ResolutionError(
        f"No join on {association.table_name}.{association.foreign_key} found for "
        f"association {association.name!r} of {query.table_name}"
    )


def resolve_table_alias(query: OrderableQuery, association_name: str) -> tuple[OrderableQuery, str]:
    """LEFT OUTER JOIN an association (if not already joined) and return the query with the name it is bound to.

    Raises:
        ResolutionError: If the query's table declares no such association, or no join matches it.
        ConfigurationError: If the association is not a to-one relation.
    """
    association = query.reflect_on_association(association_name)
    if association is None:
        raise ResolutionError(f"{query.table_name} has no association named {association_name!r}")
    _to_one_kind(association)
    query = query.left_outer_joins(association_name)
    table_name = generate_table_alias(query, association)
    logger.debug("Association %s.%s resolved to %s", query.table_name, association_name, table_name)
    return query, table_name


__all__ = ["generate_table_alias", "resolve_table_alias"]
