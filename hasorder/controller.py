"""Controller mixin exposing the ordering DSL as class methods.

    class PostsController(HasOrder):
        def index(self):
            return self.apply_orders(Post.q())

    PostsController.has_order("created_at", only=["index"])
    PostsController.has_order("creator.last_name", as_="creator", only=["index"])
    PostsController.has_order_default(["-created_at"], only=["index"])

The web framework sets ``action_name`` and ``params`` on the controller
instance before calling the action.
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterable, Mapping, Optional

from .builder import apply_orders
from .configuration import OrderConfiguration
from .protocol import OrderableQuery


class HasOrder:
    """Mixin giving each controller class its own copy-on-write OrderConfiguration."""

    order_configuration: ClassVar[OrderConfiguration] = OrderConfiguration()
    sort_param: ClassVar[str] = "sort"
    """Name of the request parameter holding the sort token."""

    action_name: str = ""
    params: Mapping[str, Any] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.order_configuration = cls.order_configuration.derive()

    @classmethod
    def has_order(cls, order: str, **options: Any) -> None:
        """Detect the sort order from the request and apply it (see OrderConfiguration.has_order)."""
        cls.order_configuration.has_order(order, **options)

    @classmethod
    def has_order_default(cls, orders: Iterable[str] | str, **options: Any) -> None:
        """Set the default order to apply (see OrderConfiguration.has_order_default)."""
        cls.order_configuration.has_order_default(orders, **options)

    def apply_orders(self, target: OrderableQuery,
                     params: Optional[Mapping[str, Any]] = None) -> OrderableQuery:
        """Apply the requested (or default) order to target."""
        params = self.params if params is None else params
        return apply_orders(
            target,
            params.get(self.sort_param),
            self.action_name,
            type(self).order_configuration,
            context=self,
        )


__all__ = ["HasOrder"]
