from __future__ import annotations

# The system factory is the single owner of every queue, order and bot.
#
# It also owns the lock that serializes all mutation: the scheduler thread and
# the interactive prompt both go through `factory.lock`, so no order is ever
# observed in two queues (or none) while it is being moved.

import threading
import time
from typing import Any, Callable

from .bot import Bot
from .config import COMPLETED_QUEUE, BotType, OrderType, ProcessingConfig
from .order import Order
from .order_queue import OrderQueue


class SystemFactory:
    """Registry of queues and bots (testable without threads)."""

    def __init__(self, config: ProcessingConfig | None = None, *, clock: Callable[[], float] = time.time) -> None:
        self.config = config or ProcessingConfig()
        self.clock = clock
        self.lock = threading.RLock()
        self._queues: dict[str, OrderQueue] = {}
        self._bots: list[Bot] = []
        self._init_queues()

    def _init_queues(self) -> None:
        priorities = {t: spec.priority for t, spec in self.config.queues.items()}
        # Processing queues in priority order, destination queue last.
        for order_type, spec in sorted(self.config.queues.items(), key=lambda kv: kv[1].priority):
            self._queues[order_type.queue_key] = OrderQueue(
                spec.name, priority=spec.priority, class_priorities=priorities
            )
        self._queues[COMPLETED_QUEUE] = OrderQueue(self.config.completed_queue_name)

    # -------------------- orders --------------------

    def create_order(self, order_type: Any) -> Order:
        """Create a PENDING order. The caller routes it with `route_order`."""
        return Order.create(order_type, self.config, created_at=self.clock())

    def route_order(self, order: Order) -> OrderQueue:
        with self.lock:
            queue = self._queues.get(order.queue_key)
            if queue is None:
                raise KeyError(f"no queue for routing key {order.queue_key!r}")
            queue.enqueue(order)
            return queue

    def find_order(self, order_id: int) -> tuple[OrderQueue, Order] | None:
        with self.lock:
            for queue in self._queues.values():
                order = queue.find(order_id)
                if order is not None:
                    return queue, order
            return None

    # -------------------- bots --------------------

    def create_bot(self, bot_type: Any = BotType.NORMAL) -> Bot:
        bot = Bot.create(bot_type, self.config)
        with self.lock:
            self._bots.append(bot)
        return bot

    def remove_newest_bot(self) -> Bot | None:
        """Pop the most recently created bot (stack discipline)."""
        with self.lock:
            if not self._bots:
                return None
            return self._bots.pop()

    def find_bot(self, bot_id: int) -> Bot | None:
        with self.lock:
            for bot in self._bots:
                if bot.id == bot_id:
                    return bot
            return None

    def idle_bots(self) -> list[Bot]:
        """Idle bots in creation order; the earliest one gets the next order."""
        with self.lock:
            return [b for b in self._bots if b.is_idle]

    # -------------------- read access --------------------

    def list_queues(self) -> dict[str, OrderQueue]:
        with self.lock:
            return dict(self._queues)

    def list_bots(self) -> list[Bot]:
        with self.lock:
            return list(self._bots)

    def processing_queues(self) -> list[OrderQueue]:
        with self.lock:
            queues = [q for key, q in self._queues.items() if key != COMPLETED_QUEUE]
        return sorted(queues, key=lambda q: q.priority if q.priority is not None else 0)

    @property
    def destination_queue(self) -> OrderQueue:
        return self._queues[COMPLETED_QUEUE]

    def queue_for(self, order_type: Any) -> OrderQueue:
        return self._queues[OrderType.parse(order_type).queue_key]

    def cleanup(self) -> None:
        """Drop every queue and bot. Terminal: used at shutdown."""
        with self.lock:
            for queue in self._queues.values():
                queue.clear()
            self._queues = {}
            self._bots = []
