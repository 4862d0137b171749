import pytest

from order_bots.config import BotType, OrderType, ProcessingConfig
from order_bots.errors import InvalidBotType, InvalidOrderType


def test_defaults():
    cfg = ProcessingConfig()
    assert cfg.tick_seconds == 1.0
    assert cfg.base_seconds_for(OrderType.VIP) == 10.0
    assert cfg.base_seconds_for(OrderType.NORMAL) == 10.0
    assert cfg.queue_priority(OrderType.VIP) < cfg.queue_priority(OrderType.NORMAL)
    assert cfg.speed_multiplier_for(BotType.NORMAL) == 1.0


def test_order_type_parse_accepts_values_and_members():
    assert OrderType.parse("VIP") is OrderType.VIP
    assert OrderType.parse("Normal") is OrderType.NORMAL
    assert OrderType.parse(OrderType.NORMAL) is OrderType.NORMAL
    assert OrderType.VIP.queue_key == "vip_queue"


def test_unknown_classes_are_rejected():
    with pytest.raises(InvalidOrderType):
        OrderType.parse("Gold")
    with pytest.raises(InvalidBotType):
        BotType.parse("TURBO")


def test_build_applies_overrides():
    cfg = ProcessingConfig.build(tick_ms=250, vip_seconds=4.0, normal_seconds=8.0, bot_speed=2.0)
    assert cfg.tick_seconds == 0.25
    assert cfg.base_seconds_for(OrderType.VIP) == 4.0
    assert cfg.base_seconds_for(OrderType.NORMAL) == 8.0
    assert cfg.speed_multiplier_for(BotType.NORMAL) == 2.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"tick_ms": 0},
        {"vip_seconds": -1.0},
        {"bot_speed": 0.0},
    ],
)
def test_build_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        ProcessingConfig.build(**kwargs)


def test_describe_mentions_every_setting():
    text = "\n".join(ProcessingConfig().describe())
    assert "VIP Queue" in text
    assert "Normal Queue" in text
    assert "Completed Queue" in text
    assert "1x" in text
    assert "1000 ms" in text
