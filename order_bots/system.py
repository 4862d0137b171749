from __future__ import annotations

# OrderSystem is what the outer layers (CLI, publisher, tests) talk to.
#
# It wires a SystemFactory and a Scheduler together and runs the scheduler on
# a daemon thread. The thread sleeps until the next scheduler event (tick or
# completion timer) and then advances the simulated clock by the same amount,
# so simulated time tracks wall time at polling granularity.

import threading
from typing import Any, Callable

from .bot import Bot
from .config import BotType, ProcessingConfig
from .factory import SystemFactory
from .order import Order
from .order_queue import OrderQueue
from .scheduler import Scheduler


class OrderSystem:
    def __init__(
        self,
        config: ProcessingConfig | None = None,
        *,
        log: Callable[[str], None] | None = None,
    ) -> None:
        self.config = config or ProcessingConfig()
        self._log = log or print
        self.factory = SystemFactory(self.config)
        self.scheduler = Scheduler(self.factory, log=self._log)

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._closed = False

    # -------------------- orders and bots --------------------

    def create_order(self, order_type: Any) -> Order:
        """Create an order and route it to its class queue."""
        self._ensure_open()
        order = self.factory.create_order(order_type)
        self.factory.route_order(order)
        return order

    def create_bot(self, bot_type: Any = BotType.NORMAL) -> Bot:
        self._ensure_open()
        return self.factory.create_bot(bot_type)

    def remove_newest_bot(self) -> Bot | None:
        if self._closed:
            return None
        return self.scheduler.remove_newest_bot()

    def list_queues(self) -> dict[str, OrderQueue]:
        return self.factory.list_queues()

    def list_bots(self) -> list[Bot]:
        return self.factory.list_bots()

    def snapshot(self) -> dict[str, Any]:
        """JSON-friendly view of every queue and bot."""
        with self.factory.lock:
            return {
                "type": "status_update",
                "sim_time": round(self.scheduler.now, 3),
                "running": self.is_running,
                "queues": {
                    key: {
                        "name": queue.name,
                        "priority": queue.priority,
                        "orders": [o.to_dict() for o in queue],
                    }
                    for key, queue in self.factory.list_queues().items()
                },
                "bots": [b.to_dict() for b in self.factory.list_bots()],
                "errors": len(self.scheduler.recent_errors),
            }

    # -------------------- scheduler loop --------------------

    @property
    def is_running(self) -> bool:
        t = self._thread
        return t is not None and t.is_alive()

    def start_scheduler(self) -> None:
        self._ensure_open()
        if self.is_running:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._scheduler_loop,
            args=(self._stop_event,),
            name="order-bots-scheduler",
            daemon=True,
        )
        self._thread.start()

    def stop_scheduler(self) -> None:
        self._stop_event.set()
        t = self._thread
        if t and t.is_alive() and t is not threading.current_thread():
            t.join(timeout=1.0)
        self._thread = None

    def shutdown(self) -> None:
        """Stop the loop, cancel outstanding timers and drop all state."""
        if self._closed:
            return
        self.stop_scheduler()
        self.scheduler.cancel_all()
        self.factory.cleanup()
        self._closed = True

    def _scheduler_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            delay = self.scheduler.seconds_until_next_event()
            if stop_event.wait(delay):
                return
            try:
                self.scheduler.advance(delay)
            except Exception as e:
                # Per-order failures are handled inside the scheduler; this only
                # keeps an unexpected failure from killing the loop.
                self._log(f"[scheduler] tick failed: {e}")

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("order system has been shut down")
