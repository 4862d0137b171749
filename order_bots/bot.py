from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import BotType, ProcessingConfig
from .errors import BotNotIdle

_bot_ids = itertools.count(1)


class BotStatus(str, Enum):
    IDLE = "IDLE"
    PROCESSING = "PROCESSING"


@dataclass(eq=False)
class Bot:
    """One worker. Speed is fixed for the bot's whole life."""

    bot_type: BotType
    speed_multiplier: float
    id: int = field(default_factory=lambda: next(_bot_ids))
    status: BotStatus = BotStatus.IDLE
    current_order_id: int | None = None

    @classmethod
    def create(cls, bot_type: Any, config: ProcessingConfig) -> Bot:
        kind = BotType.parse(bot_type)
        return cls(bot_type=kind, speed_multiplier=config.speed_multiplier_for(kind))

    def assign_order(self, order_id: int) -> None:
        if self.status is not BotStatus.IDLE:
            raise BotNotIdle(self.id, self.current_order_id)
        self.status = BotStatus.PROCESSING
        self.current_order_id = order_id

    def complete_order(self) -> None:
        self.status = BotStatus.IDLE
        self.current_order_id = None

    @property
    def is_idle(self) -> bool:
        return self.status is BotStatus.IDLE

    @property
    def is_processing(self) -> bool:
        return self.status is BotStatus.PROCESSING

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.bot_type.value,
            "status": self.status.value,
            "speed_multiplier": self.speed_multiplier,
            "current_order_id": self.current_order_id,
        }
