import time

import pytest

from order_bots.config import ProcessingConfig
from order_bots.errors import InvalidOrderType
from order_bots.system import OrderSystem


def _wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_create_order_routes_to_its_queue():
    system = OrderSystem(log=lambda _msg: None)
    vip = system.create_order("VIP")
    normal = system.create_order("Normal")
    queues = system.list_queues()
    assert list(queues["vip_queue"]) == [vip]
    assert list(queues["normal_queue"]) == [normal]


def test_invalid_order_type_is_reported():
    system = OrderSystem(log=lambda _msg: None)
    with pytest.raises(InvalidOrderType):
        system.create_order("Gold")
    assert all(q.is_empty() for q in system.list_queues().values())


def test_background_loop_completes_orders():
    cfg = ProcessingConfig.build(tick_ms=10, vip_seconds=0.05, normal_seconds=0.05)
    system = OrderSystem(cfg, log=lambda _msg: None)
    system.create_bot()
    system.create_bot()
    system.create_order("Normal")
    system.create_order("VIP")

    system.start_scheduler()
    try:
        assert _wait_for(lambda: len(system.list_queues()["completed_queue"]) == 2)
    finally:
        system.shutdown()


def test_start_and_stop_are_idempotent():
    cfg = ProcessingConfig.build(tick_ms=10)
    system = OrderSystem(cfg, log=lambda _msg: None)

    system.start_scheduler()
    system.start_scheduler()
    assert system.is_running

    system.stop_scheduler()
    system.stop_scheduler()
    assert not system.is_running

    system.start_scheduler()
    assert system.is_running
    system.shutdown()


def test_remove_on_empty_system_returns_none():
    system = OrderSystem(log=lambda _msg: None)
    before = system.snapshot()
    assert system.remove_newest_bot() is None
    assert system.snapshot() == before


def test_shutdown_drops_state_and_is_final():
    system = OrderSystem(ProcessingConfig.build(tick_ms=10), log=lambda _msg: None)
    system.create_bot()
    system.create_order("Normal")
    system.start_scheduler()

    system.shutdown()
    system.shutdown()
    assert not system.is_running
    assert system.list_bots() == []
    assert system.list_queues() == {}
    assert system.scheduler.pending_timers() == 0
    assert system.remove_newest_bot() is None
    with pytest.raises(RuntimeError):
        system.create_order("Normal")
    with pytest.raises(RuntimeError):
        system.start_scheduler()


def test_snapshot_shape():
    system = OrderSystem(log=lambda _msg: None)
    bot = system.create_bot()
    order = system.create_order("VIP")
    system.scheduler.step()

    snap = system.snapshot()
    assert snap["type"] == "status_update"
    assert snap["sim_time"] == 1.0
    assert set(snap["queues"]) == {"vip_queue", "normal_queue", "completed_queue"}
    (o,) = snap["queues"]["vip_queue"]["orders"]
    assert o["id"] == order.id
    assert o["status"] == "PROCESSING"
    assert o["worker_id"] == bot.id
    assert snap["bots"] == [bot.to_dict()]
