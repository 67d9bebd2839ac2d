"""Build ORDER BY clauses from client sort tokens.

Sorting is a convenience: a missing, malformed, unknown or inapplicable sort
token silently yields the default order. Only declarations the query cannot
honour (see ``hasorder.errors``) raise.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from .configuration import OrderConfiguration
from .errors import ConfigurationError
from .protocol import OrderableQuery
from .registry import is_applicable
from .resolver import resolve_table_alias
from .sort_key import NullsPolicy, SortDirection, parse_sort_key, split_attribute_path

logger = logging.getLogger("hasorder")


def build_table_attribute(query: OrderableQuery, attribute_path: str) -> tuple[OrderableQuery, str]:
    """Return the query (joined if needed) and the qualified column for attribute_path.

    A bare column is qualified with the query's table; ``association.column``
    joins the association and is qualified with the name that join is bound to.
    """
    association, column = split_attribute_path(attribute_path)
    table_name = query.table_name
    if association is not None:
        query, table_name = resolve_table_alias(query, association)
    return query, f"{table_name}.{column}"


def apply_order(query: OrderableQuery,
                attribute_path: str,
                direction: SortDirection = SortDirection.DESCENDING,
                nulls: NullsPolicy = NullsPolicy.UNSPECIFIED) -> OrderableQuery:
    """Append ``<table>.<column> <asc|desc>[ NULLS FIRST|NULLS LAST]`` to the query's order."""
    query, table_attribute = build_table_attribute(query, attribute_path)
    order_sql = f"{table_attribute} {SortDirection(direction).value}"
    if nulls is not NullsPolicy.UNSPECIFIED:
        order_sql += f" {nulls.sql}"
    return query.order(order_sql)


def apply_default_order(query: OrderableQuery, default_order: Iterable[str]) -> OrderableQuery:
    """Replace the query's order with the default sort tokens (nulls directives are ignored)."""
    fragments = []
    for sort_key in default_order:
        try:
            key = parse_sort_key(sort_key)
        except ValueError as error:
            raise ConfigurationError(f"Invalid default order: {error}") from error
        query, table_attribute = build_table_attribute(query, key.attribute)
        fragments.append(f"{table_attribute} {key.direction.value}")
    if not fragments:
        return query
    return query.reorder(", ".join(fragments))


def apply_orders(query: OrderableQuery,
                 sort_key: Optional[str],
                 action_name: str,
                 configuration: OrderConfiguration,
                 context: Any = None) -> OrderableQuery:
    """Order query by the client's sort_key if configuration allows it for action_name, else by default.

    Args:
        query: Query to order.
        sort_key: Raw sort token (e.g. the ``sort`` query parameter); may be None or blank.
        action_name: Name of the action being served.
        configuration: Order rules and default orders of the controller.
        context: Object guards and method-name default orders are evaluated against.

    Returns:
        The ordered query.
    """
    def default() -> OrderableQuery:
        return apply_default_order(query, configuration.default_order_for(action_name, context))

    if sort_key is None or not str(sort_key).strip():
        return default()
    try:
        key = parse_sort_key(sort_key)
    except ValueError:
        logger.debug("Ignoring malformed sort key %r", sort_key)
        return default()
    rule = configuration.registry.lookup(key.attribute)
    if rule is None:
        logger.debug("No order registered as %r, using default order", key.attribute)
        return default()
    if not is_applicable(rule, action_name, context):
        logger.debug("Order %r does not apply to action %r, using default order", key.attribute, action_name)
        return default()
    return apply_order(query, rule.attribute_path, key.direction, key.nulls)


__all__ = [
    "apply_default_order",
    "apply_order",
    "apply_orders",
    "build_table_attribute",
]
