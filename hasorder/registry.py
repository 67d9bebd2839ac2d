"""Order rules: which public sort aliases a controller accepts, and where.

A rule maps the alias a client sends (``?sort=-creator``) to the attribute path
ordered on (``creator.last_name``), restricted to some actions and optionally
guarded by a predicate evaluated against the request context (the controller).
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel, Field

Guard = Callable[[Any], Any]


def as_predicate(proc_or_name: Callable[[Any], Any] | str | None) -> Optional[Guard]:
    """Normalize a guard given as a callable or as a method name to ``(context) -> value``."""
    if proc_or_name is None:
        return None
    if callable(proc_or_name):
        return proc_or_name
    if isinstance(proc_or_name, str):
        method_name = proc_or_name

        def call_method(context: Any) -> Any:
            return getattr(context, method_name)()

        call_method.__name__ = method_name
        return call_method
    raise TypeError(f"Guard must be a callable or a method name; got {type(proc_or_name)}")


def combine_guards(if_: Callable[[Any], Any] | str | None = None,
                   unless: Callable[[Any], Any] | str | None = None) -> Optional[Guard]:
    """Merge ``if`` and ``unless`` conditions into one guard, or None when neither is given."""
    if_predicate = as_predicate(if_)
    unless_predicate = as_predicate(unless)
    if if_predicate is None and unless_predicate is None:
        return None

    def guard(context: Any) -> bool:
        if if_predicate is not None and not if_predicate(context):
            return False
        if unless_predicate is not None and unless_predicate(context):
            return False
        return True

    return guard


def _action_names(actions: Iterable[str] | str | None) -> frozenset[str]:
    """Wrap a single action name or an iterable of them into a frozenset of strings."""
    if actions is None:
        return frozenset()
    if isinstance(actions, str):
        return frozenset((actions,))
    return frozenset(map(str, actions))


class OrderRule(BaseModel):
    """One registered order: public alias, attribute path and where it applies."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    public_alias: str
    attribute_path: str
    only_actions: frozenset[str] = frozenset()
    except_actions: frozenset[str] = frozenset()
    guard: Optional[Guard] = None


def is_applicable(rule: OrderRule, action_name: str, context: Any = None) -> bool:
    """Whether rule may be used for the current action.

    The guard (if any) must hold for context. Then a non-empty ``only_actions``
    takes precedence: the action must be listed in it. Otherwise the action
    must not be listed in ``except_actions``.
    """
    if rule.guard is not None and not rule.guard(context):
        return False
    if rule.only_actions:
        return action_name in rule.only_actions
    return action_name not in rule.except_actions


class OrderRegistry(BaseModel):
    """Order rules keyed by public alias.

    ``register`` rebinds ``rules`` to a new dict instead of mutating it, so a
    registry obtained with ``model_copy()`` never sees rules registered on its
    source afterwards (and vice versa).
    """

    model_config = {"arbitrary_types_allowed": True}

    rules: dict[str, OrderRule] = Field(default_factory=dict)

    def register(self,
                 public_alias: str,
                 attribute_path: str,
                 only_actions: Iterable[str] | str | None = None,
                 except_actions: Iterable[str] | str | None = None,
                 guard: Optional[Guard] = None) -> OrderRule:
        """Register (or replace) the rule for public_alias and return it."""
        rule = OrderRule(
            public_alias=str(public_alias),
            attribute_path=str(attribute_path),
            only_actions=_action_names(only_actions),
            except_actions=_action_names(except_actions),
            guard=guard,
        )
        self.rules = {**self.rules, rule.public_alias: rule}
        return rule

    def lookup(self, public_alias: str) -> Optional[OrderRule]:
        """Return the rule registered under public_alias, or None."""
        return self.rules.get(public_alias)

    def __contains__(self, public_alias: str) -> bool:
        return public_alias in self.rules

    def __len__(self) -> int:
        return len(self.rules)


__all__ = [
    "Guard",
    "OrderRegistry",
    "OrderRule",
    "as_predicate",
    "combine_guards",
    "is_applicable",
]
