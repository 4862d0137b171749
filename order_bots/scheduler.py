from __future__ import annotations

# The scheduler is the engine of the system.
#
# It keeps its own simulated clock. Two kinds of events move the clock:
# 1) tick boundaries, every `tick_seconds` (decay pass, then assignment pass)
# 2) completion timers, one per in-flight order, keyed by order id
#
# `advance()` replays both in chronological order. When a timer and a tick fall
# on the same instant the timer fires first, so the bot it frees can take work
# in that very tick. The scheduler borrows queues and bots from the factory and
# holds `factory.lock` for every mutation.

from collections import deque
from typing import Callable

from .bot import Bot
from .errors import SchedulerInternalError
from .factory import SystemFactory
from .order import Order
from .order_queue import OrderQueue
from .timers import CompletionJob, CompletionTimers

# Float slack when comparing event times built from different sums.
_EPSILON = 1e-9


class Scheduler:
    def __init__(
        self,
        factory: SystemFactory,
        *,
        tick_seconds: float | None = None,
        log: Callable[[str], None] | None = None,
    ) -> None:
        self.factory = factory
        self.tick_seconds = float(tick_seconds if tick_seconds is not None else factory.config.tick_seconds)
        if self.tick_seconds <= 0:
            raise ValueError("tick_seconds must be > 0")
        self._log = log or print

        self._now = 0.0
        self._ticks = 0
        self._in_flight: set[int] = set()
        self._timers = CompletionTimers()
        self.recent_errors: deque[SchedulerInternalError] = deque(maxlen=50)

    # -------------------- clock --------------------

    @property
    def now(self) -> float:
        return self._now

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def in_flight(self) -> frozenset[int]:
        with self.factory.lock:
            return frozenset(self._in_flight)

    def timer_fire_at(self, order_id: int) -> float | None:
        with self.factory.lock:
            return self._timers.fire_at(order_id)

    def pending_timers(self) -> int:
        with self.factory.lock:
            return len(self._timers)

    def _next_tick_at(self) -> float:
        return (self._ticks + 1) * self.tick_seconds

    def seconds_until_next_event(self) -> float:
        """Simulated seconds until the next tick or completion timer."""
        with self.factory.lock:
            nxt = self._next_tick_at()
            fire_at = self._timers.next_fire_at()
            if fire_at is not None:
                nxt = min(nxt, fire_at)
            return max(0.0, nxt - self._now)

    def advance(self, seconds: float) -> None:
        """Move the simulated clock forward, firing timers and ticks in order."""
        if seconds < 0:
            raise ValueError("seconds must be >= 0")
        with self.factory.lock:
            target = self._now + seconds
            while True:
                next_tick = self._next_tick_at()
                fire_at = self._timers.next_fire_at()
                if fire_at is not None and fire_at <= next_tick + _EPSILON and fire_at <= target + _EPSILON:
                    self._now = max(self._now, fire_at)
                    for job in self._timers.pop_due(self._now + _EPSILON):
                        self._complete(job)
                    continue
                if next_tick <= target + _EPSILON:
                    self._now = max(self._now, next_tick)
                    self._ticks += 1
                    self._tick()
                    continue
                break
            self._now = max(self._now, target)

    def step(self) -> None:
        """Advance exactly to the next tick boundary."""
        with self.factory.lock:
            self.advance(max(0.0, self._next_tick_at() - self._now))

    # -------------------- tick --------------------

    def _tick(self) -> None:
        self._decay_remaining_times()
        self._assign_idle_bots()

    def _decay_remaining_times(self) -> None:
        for queue in self.factory.list_queues().values():
            for order in queue.processing_orders():
                order.decay_remaining_time(self.tick_seconds)

    def _assign_idle_bots(self) -> None:
        idle = self.factory.idle_bots()
        for queue in self.factory.processing_queues():
            for order in queue.pending_orders():
                if not idle:
                    return
                if order.id in self._in_flight:
                    continue
                self._assign(idle.pop(0), order, queue)

    def _assign(self, bot: Bot, order: Order, queue: OrderQueue) -> None:
        self._in_flight.add(order.id)
        try:
            bot.assign_order(order.id)
            order.assign_worker(bot.id)
            # Current remaining time, so an order handed back mid-job resumes.
            seconds = order.remaining_time / bot.speed_multiplier
            job = CompletionJob(order_id=order.id, bot_id=bot.id, queue_key=order.queue_key)
            self._timers.schedule(job, self._now + seconds)
        except Exception as e:
            self._in_flight.discard(order.id)
            self._timers.cancel(order.id)
            if bot.current_order_id == order.id:
                bot.complete_order()
            if order.is_processing and order.worker_id == bot.id:
                order.revert_to_pending()
            self._report(SchedulerInternalError("assign", order.id, e))
            return
        self._log(
            f"[scheduler] t={self._now:0.1f}s bot #{bot.id} picked up order #{order.id} "
            f"({order.order_type.value}, {seconds:0.1f}s)"
        )

    # -------------------- completion --------------------

    def _complete(self, job: CompletionJob) -> None:
        bot = self.factory.find_bot(job.bot_id)
        try:
            queue = self.factory.list_queues().get(job.queue_key)
            order = queue.find(job.order_id) if queue is not None else None
            if queue is None or order is None:
                raise LookupError(f"order not found in {job.queue_key!r}")
            order.complete(at=self.factory.clock())
            queue.dequeue_by_id(order.id)
            self.factory.destination_queue.enqueue(order)
            if bot is not None:
                bot.complete_order()
            self._log(f"[scheduler] t={self._now:0.1f}s order #{order.id} completed by bot #{job.bot_id}")
        except Exception as e:
            if bot is not None and bot.current_order_id == job.order_id:
                bot.complete_order()
            self._report(SchedulerInternalError("complete", job.order_id, e))
        finally:
            self._in_flight.discard(job.order_id)
            self._timers.cancel(job.order_id)

    # -------------------- forced removal --------------------

    def remove_newest_bot(self) -> Bot | None:
        """Remove the most recently created bot, handing its order back.

        If the bot is mid-job, its order returns to PENDING with its remaining
        time intact and its completion timer is cancelled before the bot goes.
        """
        with self.factory.lock:
            bots = self.factory.list_bots()
            if not bots:
                return None
            bot = bots[-1]
            if bot.is_processing and bot.current_order_id is not None:
                order_id = bot.current_order_id
                self._timers.cancel(order_id)
                self._in_flight.discard(order_id)
                found = self.factory.find_order(order_id)
                if found is not None and found[1].is_processing:
                    found[1].revert_to_pending()
                    self._log(
                        f"[scheduler] t={self._now:0.1f}s order #{order_id} returned to "
                        f"{found[0].name} ({found[1].remaining_time:0.1f}s left)"
                    )
                bot.complete_order()
            removed = self.factory.remove_newest_bot()
            self._log(f"[scheduler] bot #{bot.id} removed")
            return removed

    def cancel_all(self) -> None:
        with self.factory.lock:
            self._timers.clear()
            self._in_flight.clear()

    def _report(self, error: SchedulerInternalError) -> None:
        self.recent_errors.append(error)
        self._log(f"[scheduler] error: {error}")
