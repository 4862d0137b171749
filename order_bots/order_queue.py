from __future__ import annotations

from typing import Iterator, Mapping

from .config import OrderType
from .order import Order, OrderStatus


class OrderQueue:
    """Ordered container of orders.

    A processing queue is built with a priority table (order class -> number,
    lower first) and keeps its orders stably sorted by it, so orders of the
    same class stay in arrival order. The destination queue has no table and
    keeps plain append order.
    """

    def __init__(
        self,
        name: str,
        *,
        priority: int | None = None,
        class_priorities: Mapping[OrderType, int] | None = None,
    ) -> None:
        self.name = name
        self.priority = priority
        self._class_priorities = dict(class_priorities) if class_priorities is not None else None
        self._orders: list[Order] = []

    @property
    def is_priority_queue(self) -> bool:
        return self._class_priorities is not None

    @property
    def orders(self) -> tuple[Order, ...]:
        return tuple(self._orders)

    def enqueue(self, order: Order) -> None:
        self._orders.append(order)
        if self._class_priorities is not None:
            table = self._class_priorities
            # list.sort is stable: equal priorities keep insertion order.
            self._orders.sort(key=lambda o: table[o.order_type])

    def dequeue_by_id(self, order_id: int) -> bool:
        for i, o in enumerate(self._orders):
            if o.id == order_id:
                del self._orders[i]
                return True
        return False

    def find(self, order_id: int) -> Order | None:
        for o in self._orders:
            if o.id == order_id:
                return o
        return None

    def orders_with_status(self, status: OrderStatus) -> list[Order]:
        return [o for o in self._orders if o.status is status]

    def pending_orders(self) -> list[Order]:
        return self.orders_with_status(OrderStatus.PENDING)

    def processing_orders(self) -> list[Order]:
        return self.orders_with_status(OrderStatus.PROCESSING)

    def completed_orders(self) -> list[Order]:
        return self.orders_with_status(OrderStatus.COMPLETE)

    def peek_next(self) -> Order | None:
        return self._orders[0] if self._orders else None

    def is_empty(self) -> bool:
        return not self._orders

    def size(self) -> int:
        return len(self._orders)

    def clear(self) -> None:
        """Drop every reference; the orders themselves are left untouched."""
        self._orders = []

    def __len__(self) -> int:
        return len(self._orders)

    def __iter__(self) -> Iterator[Order]:
        return iter(tuple(self._orders))

    def __contains__(self, order: object) -> bool:
        return any(o is order for o in self._orders)

    def __repr__(self) -> str:
        return f"OrderQueue({self.name!r}, size={len(self._orders)})"
