"""Per-controller ordering configuration and its declaration DSL.

An ``OrderConfiguration`` holds the order rules and default orders of one
controller class. A derived configuration (a subclass's) reads its parent's
state until its first declaration, at which point it takes its own copy:
later declarations on the parent no longer reach it.

    config = OrderConfiguration()
    config.has_order("created_at", only="index")
    config.has_order("creator.last_name", as_="creator", only=["index"])
    config.has_order_default(["-created_at"], only="index")
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

from .errors import ConfigurationError
from .registry import OrderRegistry, _action_names, combine_guards

logger = logging.getLogger("hasorder")

BUILTIN_DEFAULT_ORDER: tuple[str, ...] = ("-updated_at",)
"""Default order used when no default applies to the current action."""

_ORDER_OPTIONS = frozenset(("only", "except", "if", "unless", "as"))
_DEFAULT_ORDER_OPTIONS = frozenset(("only", "except"))


def _normalize_options(options: dict[str, Any], valid: frozenset[str]) -> dict[str, Any]:
    """Accept both ``except`` and ``except_`` spellings; reject unknown keys."""
    normalized = {}
    for key, value in options.items():
        name = key[:-1] if key.endswith("_") else key
        if name not in valid:
            raise ConfigurationError(
                f"Unknown key: {key!r}. Valid keys are: {', '.join(sorted(valid))}"
            )
        normalized[name] = value
    return normalized


class DefaultOrder(BaseModel):
    """Default sort tokens, or the name of a context method returning them, for some actions."""

    orders: tuple[str, ...] | str
    only_actions: frozenset[str] = frozenset()
    except_actions: frozenset[str] = frozenset()

    def applies_to(self, action_name: str) -> bool:
        if self.only_actions:
            return action_name in self.only_actions
        return action_name not in self.except_actions

    def resolve(self, context: Any = None) -> tuple[str, ...]:
        """Return the sort tokens, calling the named method on context if needed."""
        if not isinstance(self.orders, str):
            return self.orders
        if context is None:
            raise ConfigurationError(
                f"Default order {self.orders!r} is a method name but no context was given"
            )
        orders = getattr(context, self.orders)()
        if isinstance(orders, str) or not isinstance(orders, Iterable):
            raise ConfigurationError(
                f"{type(context).__name__}.{self.orders}() must return a list of sort keys, got {orders!r}"
            )
        return tuple(map(str, orders))


class OrderConfiguration(BaseModel):
    """Order rules and default orders of one controller class."""

    model_config = {"arbitrary_types_allowed": True}

    parent: Optional[OrderConfiguration] = None
    own_registry: Optional[OrderRegistry] = None
    """None while the registry is still shared with the parent."""
    own_default_orders: Optional[list[DefaultOrder]] = None
    """None while the default orders are still shared with the parent."""

    def derive(self) -> OrderConfiguration:
        """Return a child configuration that reads this one until its first declaration."""
        return OrderConfiguration(parent=self)

    @property
    def registry(self) -> OrderRegistry:
        """The registry in effect: own once diverged, else the nearest ancestor's."""
        if self.own_registry is not None:
            return self.own_registry
        if self.parent is not None:
            return self.parent.registry
        return OrderRegistry()

    @property
    def default_orders(self) -> list[DefaultOrder]:
        """Default orders in effect, in declaration order."""
        if self.own_default_orders is not None:
            return self.own_default_orders
        if self.parent is not None:
            return self.parent.default_orders
        return []

    def has_order(self, order: str, **options: Any) -> None:
        """Allow sorting by order (a column or ``association.column``).

        Options:
            only: only apply the order to the given actions
            except / except_: do not apply the order to the given actions
            if / if_: callable or method name that must return truthy for the order to apply
            unless: callable or method name that must return falsy for the order to apply
            as / as_: public alias clients sort by (default: order itself)
        """
        options = _normalize_options(options, _ORDER_OPTIONS)
        public_alias = options.get("as") or str(order)
        if self.own_registry is None:
            self.own_registry = self.registry.model_copy()
        self.own_registry.register(
            public_alias,
            str(order),
            only_actions=options.get("only"),
            except_actions=options.get("except"),
            guard=combine_guards(options.get("if"), options.get("unless")),
        )
        logger.debug("Registered order %s as %r", order, public_alias)

    def has_order_default(self, orders: Iterable[str] | str, **options: Any) -> None:
        """Set the default order for the given actions (all actions when no filter is given).

        orders is a list of sort tokens (``["-created_at", "title"]``) or the name of a
        context method returning one.
        """
        options = _normalize_options(options, _DEFAULT_ORDER_OPTIONS)
        if isinstance(orders, str):
            value: tuple[str, ...] | str = orders
        else:
            value = tuple(map(str, orders))
        default = DefaultOrder(
            orders=value,
            only_actions=_action_names(options.get("only")),
            except_actions=_action_names(options.get("except")),
        )
        self.own_default_orders = [*self.default_orders, default]

    def default_order_for(self, action_name: str, context: Any = None) -> tuple[str, ...]:
        """Sort tokens of the last declared default order applying to action_name."""
        for default in reversed(self.default_orders):
            if default.applies_to(action_name):
                return default.resolve(context)
        return BUILTIN_DEFAULT_ORDER


OrderConfiguration.model_rebuild()


__all__ = ["BUILTIN_DEFAULT_ORDER", "DefaultOrder", "OrderConfiguration"]
