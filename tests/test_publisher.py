import threading

from order_bots.publisher import StatusPublisher
from order_bots.system import OrderSystem


class FakeMqtt:
    def __init__(self) -> None:
        self.published: list[tuple[str, dict]] = []
        self.event = threading.Event()

    def publish(self, topic, message):
        self.published.append((topic, message))
        self.event.set()


def test_publish_status_sends_snapshot():
    system = OrderSystem(log=lambda _msg: None)
    system.create_order("VIP")
    mqtt = FakeMqtt()
    pub = StatusPublisher(mqtt=mqtt, snapshot=system.snapshot, namespace="demo")

    pub.publish_status()
    topic, msg = mqtt.published[-1]
    assert topic == "demo/status/updates"
    assert msg["type"] == "status_update"
    assert len(msg["queues"]["vip_queue"]["orders"]) == 1


def test_publish_event():
    mqtt = FakeMqtt()
    pub = StatusPublisher(mqtt=mqtt, snapshot=dict, namespace="demo")
    pub.publish_event("[scheduler] bot #1 removed")
    topic, msg = mqtt.published[-1]
    assert topic == "demo/events"
    assert msg["type"] == "event"
    assert msg["message"] == "[scheduler] bot #1 removed"


def test_background_loop_publishes_until_stopped():
    mqtt = FakeMqtt()
    pub = StatusPublisher(mqtt=mqtt, snapshot=lambda: {"type": "status_update"}, namespace="demo")
    pub.start(publish_every=0.01)
    try:
        assert mqtt.event.wait(2.0)
    finally:
        pub.stop()
    count = len(mqtt.published)
    assert count >= 1
