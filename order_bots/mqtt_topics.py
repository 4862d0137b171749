"""MQTT topic helpers.

Topic construction lives in one place so the publisher and the dashboard agree
on naming. Everything sits under a configurable namespace (default
`orderbots/v0`):

- `<ns>/status/updates`
    Periodic snapshots of every queue and bot.
- `<ns>/events`
    One message per scheduler event (pickup, completion, removal, error).

Run several simulations against one broker by giving each its own
`--namespace`.
"""

from __future__ import annotations

DEFAULT_NAMESPACE = "orderbots/v0"


def status_updates(namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}/status/updates"


def events(namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}/events"
