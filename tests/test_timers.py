from order_bots.timers import CompletionJob, CompletionTimers


def _job(order_id: int) -> CompletionJob:
    return CompletionJob(order_id=order_id, bot_id=1, queue_key="normal_queue")


def test_pop_due_returns_jobs_in_fire_order():
    t = CompletionTimers()
    t.schedule(_job(1), 5.0)
    t.schedule(_job(2), 2.0)
    t.schedule(_job(3), 9.0)

    assert t.next_fire_at() == 2.0
    assert [j.order_id for j in t.pop_due(5.0)] == [2, 1]
    assert len(t) == 1
    assert 3 in t
    assert t.pop_due(8.9) == []


def test_cancel_by_order_id():
    t = CompletionTimers()
    t.schedule(_job(1), 1.0)
    t.schedule(_job(2), 2.0)

    assert t.cancel(1) is True
    assert t.cancel(1) is False
    assert t.next_fire_at() == 2.0
    assert [j.order_id for j in t.pop_due(10.0)] == [2]
    assert t.next_fire_at() is None


def test_rescheduling_replaces_the_old_timer():
    t = CompletionTimers()
    t.schedule(_job(1), 1.0)
    t.schedule(_job(1), 4.0)

    assert len(t) == 1
    assert t.fire_at(1) == 4.0
    assert t.pop_due(3.0) == []
    assert [j.order_id for j in t.pop_due(4.0)] == [1]
