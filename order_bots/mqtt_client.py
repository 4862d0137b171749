"""JSON pub/sub over paho-mqtt.

The simulation only ever broadcasts (status snapshots, scheduler events) and
the dashboard only ever listens, so this wrapper offers publish, subscribe and
message handlers, with the network loop on paho's background thread.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import paho.mqtt.client as mqtt


MessageHandler = Callable[[str, dict[str, Any]], None]


class MqttClient:
    def __init__(
        self,
        *,
        client_id: str,
        host: str,
        port: int,
        keepalive: int = 30,
    ) -> None:
        self.client_id = client_id
        self.host = host
        self.port = port
        self.keepalive = keepalive

        self._client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=client_id, clean_session=True)
        self._client.on_message = self._on_message

        # Called with (topic, decoded_json_object) for every incoming message.
        self._handlers: list[MessageHandler] = []
        self._started = False

    def start(self) -> None:
        """Connect and start the background network loop."""
        if self._started:
            return
        self._client.connect(self.host, self.port, keepalive=self.keepalive)
        self._client.loop_start()
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self._client.loop_stop()
        self._client.disconnect()
        self._started = False

    def add_handler(self, handler: MessageHandler) -> None:
        self._handlers.append(handler)

    def subscribe(self, topic: str) -> None:
        self._client.subscribe(topic, qos=0)

    def publish(self, topic: str, message: dict[str, Any]) -> None:
        payload = json.dumps(message, separators=(",", ":")).encode("utf-8")
        self._client.publish(topic, payload=payload, qos=0)

    def _on_message(self, client: mqtt.Client, userdata: Any, msg: mqtt.MQTTMessage) -> None:
        raw = msg.payload
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else str(raw)
        try:
            data = json.loads(text)
        except ValueError:
            print(f"[mqtt] dropping non-JSON message on {msg.topic}")
            return
        if not isinstance(data, dict):
            return

        for h in list(self._handlers):
            try:
                h(msg.topic, data)
            except Exception as e:
                # One broken handler must not stop delivery to the others.
                print(f"[mqtt] handler error on {msg.topic}: {e}")
