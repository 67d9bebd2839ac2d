"""Exceptions raised while building ORDER BY clauses.

User input never raises: unknown or inapplicable sort keys fall back to the
default order. The exceptions below signal programmer errors (a rule or an
association declared in a way the query cannot honour).
"""


class OrderingError(Exception):
    """Base class for all hasorder errors."""


class ConfigurationError(OrderingError, ValueError):
    """An order rule, default order or association is declared incorrectly."""


class ResolutionError(OrderingError, LookupError):
    """No join in the query matches the association being ordered on."""


__all__ = ["OrderingError", "ConfigurationError", "ResolutionError"]
