"""Error types shared by the engine, the CLI and the status publisher.

Validation errors subclass ValueError and state errors subclass RuntimeError,
so callers that only care about the broad category can catch the builtins.
"""

from __future__ import annotations

from typing import Any


class InvalidOrderType(ValueError):
    def __init__(self, order_type: Any) -> None:
        super().__init__(f"Invalid order type: {order_type!r}")
        self.order_type = order_type


class InvalidBotType(ValueError):
    def __init__(self, bot_type: Any) -> None:
        super().__init__(f"Invalid bot type: {bot_type!r}")
        self.bot_type = bot_type


class BotNotIdle(RuntimeError):
    def __init__(self, bot_id: int, current_order_id: int | None) -> None:
        super().__init__(f"Bot #{bot_id} is not idle (processing order #{current_order_id})")
        self.bot_id = bot_id
        self.current_order_id = current_order_id


class SchedulerInternalError(RuntimeError):
    """A failure while assigning or completing one order.

    The scheduler logs these and keeps ticking; they never leave `advance()`.
    """

    def __init__(self, stage: str, order_id: int, cause: BaseException | None = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{stage} failed for order #{order_id}{detail}")
        self.stage = stage
        self.order_id = order_id
        self.cause = cause
