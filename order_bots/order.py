from __future__ import annotations

# Order entity.
#
# An order is created PENDING by the factory and then only moves forward:
#   PENDING -> PROCESSING -> COMPLETE
# The one exception is PROCESSING -> PENDING when the bot working on it is
# removed; the remaining time is kept so the next bot resumes the job.

import itertools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import OrderType, ProcessingConfig

_order_ids = itertools.count(1)


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETE = "COMPLETE"


@dataclass(eq=False)
class Order:
    order_type: OrderType
    processing_time: float
    id: int = field(default_factory=lambda: next(_order_ids))
    status: OrderStatus = OrderStatus.PENDING
    created_at: float = field(default_factory=time.time)
    remaining_time: float = field(init=False)
    completed_at: float | None = None
    worker_id: int | None = None

    def __post_init__(self) -> None:
        self.remaining_time = float(self.processing_time)

    @classmethod
    def create(cls, order_type: Any, config: ProcessingConfig, *, created_at: float | None = None) -> Order:
        """Create a PENDING order; raises InvalidOrderType for unknown classes."""
        kind = OrderType.parse(order_type)
        order = cls(order_type=kind, processing_time=config.base_seconds_for(kind))
        if created_at is not None:
            order.created_at = created_at
        return order

    @property
    def queue_key(self) -> str:
        return self.order_type.queue_key

    # -------------------- transitions --------------------

    def assign_worker(self, worker_id: int) -> None:
        if self.status is not OrderStatus.PENDING:
            raise RuntimeError(f"order #{self.id} cannot be assigned while {self.status.value}")
        self.worker_id = worker_id
        self.status = OrderStatus.PROCESSING

    def complete(self, at: float | None = None) -> None:
        if self.status is not OrderStatus.PROCESSING:
            raise RuntimeError(f"order #{self.id} cannot complete while {self.status.value}")
        self.status = OrderStatus.COMPLETE
        self.completed_at = time.time() if at is None else at
        self.worker_id = None
        self.remaining_time = 0.0

    def revert_to_pending(self) -> None:
        """Hand the order back to its queue; remaining_time is preserved."""
        if self.status is not OrderStatus.PROCESSING:
            raise RuntimeError(f"order #{self.id} cannot revert while {self.status.value}")
        self.status = OrderStatus.PENDING
        self.worker_id = None

    def decay_remaining_time(self, delta_seconds: float) -> None:
        if self.status is not OrderStatus.PROCESSING:
            return
        self.remaining_time = max(0.0, self.remaining_time - delta_seconds)

    # -------------------- predicates --------------------

    @property
    def is_pending(self) -> bool:
        return self.status is OrderStatus.PENDING

    @property
    def is_processing(self) -> bool:
        return self.status is OrderStatus.PROCESSING

    @property
    def is_complete(self) -> bool:
        return self.status is OrderStatus.COMPLETE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.order_type.value,
            "status": self.status.value,
            "created_at": self.created_at,
            "processing_time": self.processing_time,
            "remaining_time": round(self.remaining_time, 3),
            "completed_at": self.completed_at,
            "worker_id": self.worker_id,
        }
