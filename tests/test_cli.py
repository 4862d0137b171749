from order_bots.cli import MenuInterface, render_status
from order_bots.system import OrderSystem


def _menu():
    out: list[str] = []
    system = OrderSystem(log=lambda _msg: None)
    return system, MenuInterface(system, output=out.append), out


def test_add_order_and_bot_through_menus():
    system, menu, out = _menu()

    assert menu.handle("1")
    assert menu.menu == "add_order"
    assert menu.handle("1")
    assert menu.menu == "main"
    assert len(system.list_queues()["vip_queue"]) == 1

    menu.handle("2")
    menu.handle("1")
    assert len(system.list_bots()) == 1
    assert any("added" in line for line in out)


def test_unknown_order_type_stays_in_submenu():
    system, menu, out = _menu()
    menu.handle("1")
    menu.handle("9")
    assert menu.menu == "add_order"
    assert "Unknown order type" in out[-1]
    menu.handle("3")
    assert menu.menu == "main"
    assert all(q.is_empty() for q in system.list_queues().values())


def test_remove_bot_confirmation():
    system, menu, out = _menu()
    system.create_bot()
    newest = system.create_bot()

    menu.handle("3")
    menu.show_menu()
    assert f"Bot #{newest.id}" in out[-1]
    menu.handle("1")
    assert f"Bot #{newest.id} removed." in out[-1]
    assert len(system.list_bots()) == 1


def test_config_status_and_exit():
    system, menu, out = _menu()
    system.create_order("Normal")

    menu.handle("4")
    assert any("Tick period" in line for line in out)

    menu.handle("5")
    assert any("Normal Queue" in line for line in out)
    assert any("PENDING" in line for line in out)

    assert menu.handle("6") is False


def test_render_status_shows_progress_and_events():
    system = OrderSystem(log=lambda _msg: None)
    bot = system.create_bot()
    order = system.create_order("Normal")
    system.scheduler.step()
    system.scheduler.step()

    lines = render_status(system.snapshot(), ["[scheduler] something happened"])
    text = "\n".join(lines)
    assert f"Order #{order.id} (Normal) - PROCESSING (9.0s remaining, bot #{bot.id})" in text
    assert f"Bot #{bot.id} (NORMAL) - PROCESSING (order #{order.id})" in text
    assert "something happened" in text
