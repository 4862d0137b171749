"""Cancellable one-shot completion timers on a simulated clock.

Timers live in a min-heap ordered by fire time. Each order id maps to its live
entry, so cancelling is a dict pop; the stale heap entry is skipped when it
surfaces.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CompletionJob:
    order_id: int
    bot_id: int
    queue_key: str


@dataclass(order=True)
class _TimerEntry:
    fire_at: float
    seq: int
    job: CompletionJob = field(compare=False)


class CompletionTimers:
    def __init__(self) -> None:
        self._heap: list[_TimerEntry] = []
        self._live: dict[int, _TimerEntry] = {}
        self._seq = itertools.count()

    def schedule(self, job: CompletionJob, fire_at: float) -> None:
        """Arm (or re-arm) the timer for `job.order_id`."""
        entry = _TimerEntry(fire_at=fire_at, seq=next(self._seq), job=job)
        self._live[job.order_id] = entry
        heapq.heappush(self._heap, entry)

    def cancel(self, order_id: int) -> bool:
        return self._live.pop(order_id, None) is not None

    def fire_at(self, order_id: int) -> float | None:
        entry = self._live.get(order_id)
        return entry.fire_at if entry is not None else None

    def next_fire_at(self) -> float | None:
        self._drop_stale()
        return self._heap[0].fire_at if self._heap else None

    def pop_due(self, now: float) -> list[CompletionJob]:
        """Remove and return every live job with fire_at <= now, earliest first."""
        due: list[CompletionJob] = []
        while True:
            self._drop_stale()
            if not self._heap or self._heap[0].fire_at > now:
                return due
            entry = heapq.heappop(self._heap)
            del self._live[entry.job.order_id]
            due.append(entry.job)

    def clear(self) -> None:
        self._heap = []
        self._live = {}

    def _drop_stale(self) -> None:
        while self._heap and self._live.get(self._heap[0].job.order_id) is not self._heap[0]:
            heapq.heappop(self._heap)

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._live

    def __len__(self) -> int:
        return len(self._live)
