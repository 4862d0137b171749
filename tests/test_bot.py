import pytest

from order_bots.bot import Bot, BotStatus
from order_bots.config import BotType, ProcessingConfig
from order_bots.errors import BotNotIdle, InvalidBotType


def test_create_uses_configured_speed():
    bot = Bot.create("NORMAL", ProcessingConfig.build(bot_speed=1.5))
    assert bot.bot_type is BotType.NORMAL
    assert bot.speed_multiplier == 1.5
    assert bot.is_idle
    assert bot.current_order_id is None


def test_create_rejects_unknown_type():
    with pytest.raises(InvalidBotType):
        Bot.create("TURBO", ProcessingConfig())


def test_assign_and_complete():
    bot = Bot.create(BotType.NORMAL, ProcessingConfig())
    bot.assign_order(42)
    assert bot.status is BotStatus.PROCESSING
    assert bot.current_order_id == 42

    bot.complete_order()
    assert bot.is_idle
    assert bot.current_order_id is None


def test_assign_busy_bot_raises():
    bot = Bot.create(BotType.NORMAL, ProcessingConfig())
    bot.assign_order(1)
    with pytest.raises(BotNotIdle):
        bot.assign_order(2)
    assert bot.current_order_id == 1
