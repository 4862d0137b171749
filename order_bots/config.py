from __future__ import annotations

# Processing configuration.
#
# Order classes and bot classes are closed enums; everything tunable (tick
# period, base processing time per order class, bot speed) lives in one frozen
# dataclass that validates itself on construction:
#   processing_seconds = remaining_time / speed_multiplier

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from .errors import InvalidBotType, InvalidOrderType

COMPLETED_QUEUE = "completed_queue"


class OrderType(str, Enum):
    VIP = "VIP"
    NORMAL = "Normal"

    @classmethod
    def parse(cls, value: Any) -> OrderType:
        """Accept an OrderType or its value ("VIP", "Normal")."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if value == member.value:
                return member
        raise InvalidOrderType(value)

    @property
    def queue_key(self) -> str:
        return f"{self.value.lower()}_queue"


class BotType(str, Enum):
    NORMAL = "NORMAL"

    @classmethod
    def parse(cls, value: Any) -> BotType:
        if isinstance(value, cls):
            return value
        for member in cls:
            if value == member.value:
                return member
        raise InvalidBotType(value)


@dataclass(frozen=True)
class QueueSpec:
    name: str
    priority: int


@dataclass(frozen=True)
class BotSpec:
    name: str
    speed_multiplier: float


def _default_base_seconds() -> dict[OrderType, float]:
    return {OrderType.VIP: 10.0, OrderType.NORMAL: 10.0}


def _default_queues() -> dict[OrderType, QueueSpec]:
    return {
        OrderType.VIP: QueueSpec(name="VIP Queue", priority=1),
        OrderType.NORMAL: QueueSpec(name="Normal Queue", priority=2),
    }


def _default_bots() -> dict[BotType, BotSpec]:
    return {BotType.NORMAL: BotSpec(name="Normal Bot", speed_multiplier=1.0)}


@dataclass(frozen=True)
class ProcessingConfig:
    tick_ms: int = 1000
    base_seconds: Mapping[OrderType, float] = field(default_factory=_default_base_seconds)
    queues: Mapping[OrderType, QueueSpec] = field(default_factory=_default_queues)
    completed_queue_name: str = "Completed Queue"
    bots: Mapping[BotType, BotSpec] = field(default_factory=_default_bots)

    def __post_init__(self) -> None:
        if self.tick_ms <= 0:
            raise ValueError("tick_ms must be > 0")
        for order_type in OrderType:
            if order_type not in self.base_seconds:
                raise ValueError(f"missing base_seconds for {order_type.value}")
            if self.base_seconds[order_type] < 0:
                raise ValueError(f"base_seconds for {order_type.value} must be >= 0")
            if order_type not in self.queues:
                raise ValueError(f"missing queue for {order_type.value}")
        for bot_type in BotType:
            if bot_type not in self.bots:
                raise ValueError(f"missing bot settings for {bot_type.value}")
            if self.bots[bot_type].speed_multiplier <= 0:
                raise ValueError(f"speed_multiplier for {bot_type.value} must be > 0")

    @classmethod
    def build(
        cls,
        *,
        tick_ms: int = 1000,
        vip_seconds: float = 10.0,
        normal_seconds: float = 10.0,
        bot_speed: float = 1.0,
    ) -> ProcessingConfig:
        """Build a config from the flat values the CLI exposes."""
        return cls(
            tick_ms=tick_ms,
            base_seconds={OrderType.VIP: vip_seconds, OrderType.NORMAL: normal_seconds},
            bots={BotType.NORMAL: BotSpec(name="Normal Bot", speed_multiplier=bot_speed)},
        )

    @property
    def tick_seconds(self) -> float:
        return self.tick_ms / 1000.0

    def base_seconds_for(self, order_type: OrderType) -> float:
        return float(self.base_seconds[order_type])

    def queue_priority(self, order_type: OrderType) -> int:
        return self.queues[order_type].priority

    def speed_multiplier_for(self, bot_type: BotType) -> float:
        return float(self.bots[bot_type].speed_multiplier)

    def describe(self) -> list[str]:
        """Human-readable summary for the "show config" menu entry."""
        lines = ["Queue settings:"]
        for order_type, spec in sorted(self.queues.items(), key=lambda kv: kv[1].priority):
            lines.append(
                f"  {spec.name}: priority {spec.priority}, base time {self.base_seconds_for(order_type):g}s"
            )
        lines.append(f"  {self.completed_queue_name}: destination")
        lines.append("Bot settings:")
        for spec in self.bots.values():
            lines.append(f"  {spec.name}: speed multiplier {spec.speed_multiplier:g}x")
        lines.append("System settings:")
        lines.append(f"  Tick period: {self.tick_ms} ms")
        return lines
