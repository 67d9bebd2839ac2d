"""hasorder: client-driven ORDER BY clauses with per-action rules and default orders."""

from .builder import apply_default_order, apply_order, apply_orders, build_table_attribute
from .configuration import OrderConfiguration
from .controller import HasOrder
from .errors import ConfigurationError, OrderingError, ResolutionError
from .query import Query
from .registry import OrderRegistry, OrderRule, is_applicable
from .resolver import resolve_table_alias
from .sort_key import NullsPolicy, ParsedSortKey, SortDirection, parse_sort_key
from .table import Table, belongs_to, has_many, has_one

__all__ = [
    "ConfigurationError",
    "HasOrder",
    "NullsPolicy",
    "OrderConfiguration",
    "OrderRegistry",
    "OrderRule",
    "OrderingError",
    "ParsedSortKey",
    "Query",
    "ResolutionError",
    "SortDirection",
    "Table",
    "apply_default_order",
    "apply_order",
    "apply_orders",
    "belongs_to",
    "build_table_attribute",
    "has_many",
    "has_one",
    "is_applicable",
    "parse_sort_key",
    "resolve_table_alias",
]
