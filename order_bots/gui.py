from __future__ import annotations

# Tkinter dashboard for a running simulation.
#
# Listens on `<ns>/status/updates` and `<ns>/events` (the simulation must be
# started with `--publish`).
#
# paho-mqtt delivers messages on its own network thread, while Tkinter must be
# updated from the UI thread, so incoming messages go through a Queue that the
# UI drains with `root.after(...)`.

import argparse
import queue
import time
import tkinter as tk
from tkinter import ttk
from typing import Any, cast

from .mqtt_client import MqttClient
from .mqtt_topics import DEFAULT_NAMESPACE, events, status_updates


class DashboardApp:
    def __init__(self, *, mqtt_host: str, mqtt_port: int, namespace: str, refresh_ms: int = 250) -> None:
        self.mqtt_host = mqtt_host
        self.mqtt_port = mqtt_port
        self.namespace = namespace
        self.refresh_ms = refresh_ms

        self.root = tk.Tk()
        self.root.title("Order Bots Dashboard")
        self.root.geometry("760x560")

        self.info_var = tk.StringVar(value="Connecting...")
        ttk.Label(self.root, textvariable=self.info_var).pack(fill=cast(Any, tk.X), padx=10, pady=(10, 5))

        order_cols = ("queue", "order_id", "type", "status", "remaining", "bot")
        self.orders_tree = ttk.Treeview(self.root, columns=order_cols, show="headings", height=12)
        for col, title, width in (
            ("queue", "Queue", 130),
            ("order_id", "Order", 70),
            ("type", "Type", 80),
            ("status", "Status", 110),
            ("remaining", "Remaining", 100),
            ("bot", "Bot", 70),
        ):
            self.orders_tree.heading(col, text=title)
            self.orders_tree.column(col, width=width, anchor=cast(Any, tk.W))
        self.orders_tree.pack(fill=cast(Any, tk.BOTH), expand=True, padx=10, pady=5)

        bot_cols = ("bot_id", "type", "status", "order")
        self.bots_tree = ttk.Treeview(self.root, columns=bot_cols, show="headings", height=5)
        for col, title in (("bot_id", "Bot"), ("type", "Type"), ("status", "Status"), ("order", "Order")):
            self.bots_tree.heading(col, text=title)
            self.bots_tree.column(col, width=120, anchor=cast(Any, tk.W))
        self.bots_tree.pack(fill=cast(Any, tk.X), padx=10, pady=5)

        self.events_list = tk.Listbox(self.root, height=6)
        self.events_list.pack(fill=cast(Any, tk.X), padx=10, pady=(5, 10))

        self._inbox: "queue.Queue[dict[str, Any]]" = queue.Queue(maxsize=20)
        self._mqtt = MqttClient(client_id=f"dashboard-{int(time.time())}", host=mqtt_host, port=mqtt_port)
        self._last_snapshot_ts: float | None = None

        self.root.protocol("WM_DELETE_WINDOW", self.close)

    def start(self) -> None:
        # Keep the window alive even when the broker is unreachable.
        try:
            self._mqtt.start()
            self._mqtt.subscribe(status_updates(self.namespace))
            self._mqtt.subscribe(events(self.namespace))
            self._mqtt.add_handler(self._on_mqtt_message)
            self.info_var.set(self._header("waiting for updates..."))
        except OSError as e:
            self.info_var.set(f"MQTT connection failed: {e}")

        self.root.after(cast(Any, self.refresh_ms), self._drain_inbox)
        self.root.mainloop()

    def close(self) -> None:
        try:
            self._mqtt.stop()
        finally:
            self.root.destroy()

    def _header(self, suffix: str) -> str:
        return f"MQTT {self.mqtt_host}:{self.mqtt_port} | namespace={self.namespace} | {suffix}"

    # -------------------- MQTT thread callback --------------------

    def _on_mqtt_message(self, topic: str, msg: dict[str, Any]) -> None:
        if msg.get("type") not in ("status_update", "event"):
            return
        try:
            self._inbox.put_nowait(msg)
        except queue.Full:
            # UI is behind; the next snapshot replaces this one anyway.
            pass

    # -------------------- UI thread polling --------------------

    def _drain_inbox(self) -> None:
        latest: dict[str, Any] | None = None
        while True:
            try:
                msg = self._inbox.get_nowait()
            except queue.Empty:
                break
            if msg.get("type") == "event":
                self._append_event(str(msg.get("message", "")))
            else:
                latest = msg

        if latest is not None:
            self._last_snapshot_ts = time.time()
            self._render_status(latest)
            self.info_var.set(self._header(f"simulated t={latest.get('sim_time', 0.0):0.1f}s"))
        elif self._last_snapshot_ts is not None:
            age = max(0.0, time.time() - self._last_snapshot_ts)
            self.info_var.set(self._header(f"last update {age:0.1f}s ago"))

        self.root.after(cast(Any, self.refresh_ms), self._drain_inbox)

    def _append_event(self, line: str) -> None:
        self.events_list.insert(cast(Any, tk.END), line)
        while self.events_list.size() > 50:
            self.events_list.delete(0)
        self.events_list.see(cast(Any, tk.END))

    def _render_status(self, snapshot: dict[str, Any]) -> None:
        for tree in (self.orders_tree, self.bots_tree):
            for item in tree.get_children():
                tree.delete(item)

        queues = snapshot.get("queues")
        if isinstance(queues, dict):
            for q in queues.values():
                for o in q.get("orders", []):
                    bot = o.get("worker_id")
                    self.orders_tree.insert(
                        "",
                        cast(Any, tk.END),
                        values=(
                            q.get("name", "?"),
                            f"#{o.get('id')}",
                            o.get("type", "?"),
                            o.get("status", "?"),
                            f"{float(o.get('remaining_time', 0.0)):0.1f}s",
                            f"#{bot}" if bot is not None else "-",
                        ),
                    )

        bots = snapshot.get("bots")
        if not isinstance(bots, list) or not bots:
            self.bots_tree.insert("", cast(Any, tk.END), values=("(none)", "-", "-", "-"))
            return
        for b in bots:
            current = b.get("current_order_id")
            self.bots_tree.insert(
                "",
                cast(Any, tk.END),
                values=(f"#{b.get('id')}", b.get("type", "?"), b.get("status", "?"), f"#{current}" if current else "-"),
            )


def main() -> None:
    parser = argparse.ArgumentParser(description="GUI dashboard (Tkinter + MQTT)")
    parser.add_argument("--mqtt-host", default="127.0.0.1")
    parser.add_argument("--mqtt-port", type=int, default=1883)
    parser.add_argument("--namespace", default=DEFAULT_NAMESPACE)
    parser.add_argument("--refresh-ms", type=int, default=250)
    args = parser.parse_args()

    app = DashboardApp(
        mqtt_host=args.mqtt_host,
        mqtt_port=args.mqtt_port,
        namespace=args.namespace,
        refresh_ms=args.refresh_ms,
    )
    app.start()


if __name__ == "__main__":
    main()
