from __future__ import annotations

# Status publisher.
#
# Broadcasts `OrderSystem.snapshot()` on `<ns>/status/updates` at a fixed
# interval and forwards scheduler event lines to `<ns>/events`, so a dashboard
# can follow the simulation without touching the engine.

import threading
import time
from typing import Any, Callable, Protocol

from .mqtt_topics import DEFAULT_NAMESPACE, events, status_updates


class Publisher(Protocol):
    def publish(self, topic: str, message: dict[str, Any]) -> None: ...


class StatusPublisher:
    def __init__(
        self,
        *,
        mqtt: Publisher,
        snapshot: Callable[[], dict[str, Any]],
        namespace: str = DEFAULT_NAMESPACE,
    ) -> None:
        self.mqtt = mqtt
        self.snapshot = snapshot
        self.namespace = namespace

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self, *, publish_every: float = 1.0) -> None:
        if publish_every <= 0:
            raise ValueError("publish_every must be > 0")
        if self._thread and self._thread.is_alive():
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._publisher_loop,
            args=(publish_every, self._stop_event),
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        t = self._thread
        if t and t.is_alive():
            t.join(timeout=1.0)
        self._thread = None

    def publish_status(self) -> None:
        self.mqtt.publish(status_updates(self.namespace), self.snapshot())

    def publish_event(self, message: str) -> None:
        self.mqtt.publish(events(self.namespace), {"type": "event", "message": message, "ts": time.time()})

    def _publisher_loop(self, interval: float, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                self.publish_status()
            except Exception as e:
                # Keep publishing; the next snapshot supersedes this one anyway.
                print(f"[publisher] status publish failed: {e}")
            stop_event.wait(interval)
