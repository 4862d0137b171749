"""Order fulfillment simulation: priority order queues served by worker bots.

The engine is made of:
- per-class order queues (VIP before Normal) and a completed queue
- a pool of bots, removed newest-first
- a scheduler ticking on a simulated clock, with one cancellable completion
  timer per in-flight order

Status can optionally be broadcast over MQTT for the Tkinter dashboard.

Start with `python -m order_bots.app run --bots 2`.
"""
