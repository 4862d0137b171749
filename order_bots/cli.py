from __future__ import annotations

# Interactive text menu.
#
# The prompt blocks on input() in the main thread while the scheduler keeps
# ticking on its own thread. Scheduler events are collected into a bounded
# buffer and shown with the status view instead of being printed over the
# prompt.
#
#   python -m order_bots.cli --bots 2 --tick-ms 500

import argparse
import time
from collections import deque
from typing import Any, Callable

from .config import BotType, OrderType, ProcessingConfig
from .order import OrderStatus
from .system import OrderSystem

MAIN_MENU = [
    "1. Add order",
    "2. Add bot",
    "3. Remove newest bot",
    "4. Show config",
    "5. Show status",
    "6. Exit",
]
ORDER_MENU = ["1. VIP order", "2. Normal order", "3. Back"]
BOT_MENU = ["1. Normal bot", "2. Back"]


def render_status(snapshot: dict[str, Any], recent_events: list[str] | None = None) -> list[str]:
    """Format a system snapshot as display lines."""
    lines = [f"=== System status (t={snapshot.get('sim_time', 0.0):0.1f}s) ==="]
    for queue in snapshot.get("queues", {}).values():
        lines.append(f"  {queue['name']}:")
        orders = queue.get("orders", [])
        if not orders:
            lines.append("    No orders")
            continue
        for o in orders:
            extra = ""
            if o["status"] == OrderStatus.PROCESSING.value:
                extra = f" ({o['remaining_time']:0.1f}s remaining, bot #{o['worker_id']})"
            elif o["status"] == OrderStatus.PENDING.value and o["remaining_time"] < o["processing_time"]:
                extra = f" ({o['remaining_time']:0.1f}s left)"
            lines.append(f"    Order #{o['id']} ({o['type']}) - {o['status']}{extra}")

    lines.append("  Bots:")
    bots = snapshot.get("bots", [])
    if not bots:
        lines.append("    No bots available")
    for b in bots:
        extra = f" (order #{b['current_order_id']})" if b["current_order_id"] is not None else ""
        lines.append(f"    Bot #{b['id']} ({b['type']}) - {b['status']}{extra}")

    if recent_events:
        lines.append("  Recent events:")
        lines.extend(f"    {e}" for e in recent_events)
    return lines


class MenuInterface:
    """Menu state machine; `handle()` takes one line of input."""

    def __init__(
        self,
        system: OrderSystem,
        *,
        events: deque[str] | None = None,
        output: Callable[[str], None] = print,
    ) -> None:
        self.system = system
        self.events = events if events is not None else deque(maxlen=10)
        self.output = output
        self.menu = "main"

    def prompt(self) -> str:
        if self.menu == "add_order":
            return "Order type (1-3): "
        if self.menu == "add_bot":
            return "Bot type (1-2): "
        if self.menu == "remove_bot":
            return "Confirm removal (1 = yes, 2 = back): "
        return "Enter command (1-6): "

    def show_menu(self) -> None:
        if self.menu == "add_order":
            items = ORDER_MENU
        elif self.menu == "add_bot":
            items = BOT_MENU
        elif self.menu == "remove_bot":
            bots = self.system.list_bots()
            if not bots:
                self.output("No bots available to remove.")
                self.menu = "main"
                items = MAIN_MENU
            else:
                newest = bots[-1]
                self.output(f"Remove newest bot: Bot #{newest.id} ({newest.status.value})")
                return
        else:
            items = MAIN_MENU
        for item in items:
            self.output(item)

    def handle(self, command: str) -> bool:
        """Process one command. Returns False when the user asked to exit."""
        command = command.strip()
        if self.menu == "add_order":
            return self._handle_add_order(command)
        if self.menu == "add_bot":
            return self._handle_add_bot(command)
        if self.menu == "remove_bot":
            return self._handle_remove_bot(command)

        if command == "1":
            self.menu = "add_order"
        elif command == "2":
            self.menu = "add_bot"
        elif command == "3":
            self.menu = "remove_bot"
        elif command == "4":
            for line in self.system.config.describe():
                self.output(line)
        elif command == "5":
            for line in render_status(self.system.snapshot(), list(self.events)):
                self.output(line)
        elif command == "6":
            return False
        else:
            self.output(f"Unknown command: {command!r}")
        return True

    def _handle_add_order(self, command: str) -> bool:
        choices = {"1": OrderType.VIP, "2": OrderType.NORMAL}
        if command in choices:
            self.add_order(choices[command])
        elif command != "3":
            self.output(f"Unknown order type: {command!r}")
            return True
        self.menu = "main"
        return True

    def _handle_add_bot(self, command: str) -> bool:
        if command == "1":
            self.add_bot(BotType.NORMAL)
        elif command != "2":
            self.output(f"Unknown bot type: {command!r}")
            return True
        self.menu = "main"
        return True

    def _handle_remove_bot(self, command: str) -> bool:
        if command == "1":
            bot = self.system.remove_newest_bot()
            if bot is None:
                self.output("No bots available to remove.")
            else:
                self.output(f"Bot #{bot.id} removed.")
        self.menu = "main"
        return True

    def add_order(self, order_type: Any) -> None:
        try:
            order = self.system.create_order(order_type)
        except ValueError as e:
            self.output(f"Error adding order: {e}")
            return
        self.output(f"Order #{order.id} ({order.order_type.value}) added to {order.queue_key}.")

    def add_bot(self, bot_type: Any) -> None:
        try:
            bot = self.system.create_bot(bot_type)
        except ValueError as e:
            self.output(f"Error adding bot: {e}")
            return
        self.output(f"Bot #{bot.id} added.")


def run_cli(
    *,
    config: ProcessingConfig,
    initial_bots: int = 0,
    publish: bool = False,
    mqtt_host: str = "127.0.0.1",
    mqtt_port: int = 1883,
    namespace: str = "orderbots/v0",
    publish_status_every: float = 1.0,
) -> None:
    if initial_bots < 0:
        raise ValueError("initial_bots must be >= 0")

    events: deque[str] = deque(maxlen=10)
    publisher = None
    mqtt_client = None

    def log(message: str) -> None:
        events.append(message)
        if publisher is not None:
            try:
                publisher.publish_event(message)
            except Exception as e:
                events.append(f"[publisher] event publish failed: {e}")

    system = OrderSystem(config, log=log)

    if publish:
        # Import MQTT dependencies only when broadcasting.
        from .mqtt_client import MqttClient
        from .publisher import StatusPublisher

        mqtt_client = MqttClient(client_id=f"orderbots-{int(time.time())}", host=mqtt_host, port=mqtt_port)
        mqtt_client.start()
        publisher = StatusPublisher(mqtt=mqtt_client, snapshot=system.snapshot, namespace=namespace)
        publisher.start(publish_every=publish_status_every)
        print(f"[run] publishing status to MQTT {mqtt_host}:{mqtt_port}, namespace={namespace}")

    for _ in range(initial_bots):
        system.create_bot(BotType.NORMAL)

    system.start_scheduler()
    menu = MenuInterface(system, events=events)
    print("=== Order Bots ===")

    try:
        running = True
        while running:
            menu.show_menu()
            try:
                line = input(menu.prompt())
            except EOFError:
                break
            running = menu.handle(line)
    except KeyboardInterrupt:
        pass
    finally:
        print("[run] shutting down")
        if publisher is not None:
            publisher.stop()
        if mqtt_client is not None:
            mqtt_client.stop()
        system.shutdown()


def add_config_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--tick-ms", type=int, default=1000, help="scheduler tick period in milliseconds")
    parser.add_argument("--vip-seconds", type=float, default=10.0, help="base processing time of a VIP order")
    parser.add_argument("--normal-seconds", type=float, default=10.0, help="base processing time of a Normal order")
    parser.add_argument("--bot-speed", type=float, default=1.0, help="speed multiplier of a Normal bot")
    parser.add_argument("--bots", type=int, default=0, help="bots to create at startup")


def add_mqtt_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--mqtt-host", default="127.0.0.1")
    parser.add_argument("--mqtt-port", type=int, default=1883)
    parser.add_argument("--namespace", default="orderbots/v0")


def config_from_args(args: argparse.Namespace) -> ProcessingConfig:
    return ProcessingConfig.build(
        tick_ms=args.tick_ms,
        vip_seconds=args.vip_seconds,
        normal_seconds=args.normal_seconds,
        bot_speed=args.bot_speed,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Order Bots interactive menu")
    add_config_args(parser)
    add_mqtt_args(parser)
    parser.add_argument("--publish", action="store_true", help="broadcast status snapshots over MQTT")
    parser.add_argument("--publish-status-every", type=float, default=1.0)
    args = parser.parse_args()

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    run_cli(
        config=config,
        initial_bots=args.bots,
        publish=args.publish,
        mqtt_host=args.mqtt_host,
        mqtt_port=args.mqtt_port,
        namespace=args.namespace,
        publish_status_every=args.publish_status_every,
    )


if __name__ == "__main__":
    main()
