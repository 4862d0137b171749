from __future__ import annotations

# Single-entrypoint runner.
#
#     python -m order_bots.app run --bots 2 [--publish]
#     python -m order_bots.app dashboard
#
# `run` starts the engine with the interactive menu; `dashboard` opens the
# Tkinter window that follows a simulation started with `run --publish`.

import argparse

from .cli import add_config_args, add_mqtt_args


def main() -> None:
    parser = argparse.ArgumentParser(description="Order Bots simulation - main entrypoint")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser("run", help="Start the scheduler with the interactive menu")
    add_config_args(p_run)
    add_mqtt_args(p_run)
    p_run.add_argument("--publish", action="store_true", help="broadcast status snapshots over MQTT")
    p_run.add_argument("--publish-status-every", type=float, default=1.0)

    p_dash = sub.add_parser("dashboard", help="Open the Tkinter dashboard (needs `run --publish`)")
    add_mqtt_args(p_dash)
    p_dash.add_argument("--refresh-ms", type=int, default=250)

    args = parser.parse_args()

    if args.cmd == "run":
        from .cli import main as run

        run_args = [
            "--tick-ms",
            str(args.tick_ms),
            "--vip-seconds",
            str(args.vip_seconds),
            "--normal-seconds",
            str(args.normal_seconds),
            "--bot-speed",
            str(args.bot_speed),
            "--bots",
            str(args.bots),
            "--mqtt-host",
            args.mqtt_host,
            "--mqtt-port",
            str(args.mqtt_port),
            "--namespace",
            args.namespace,
            "--publish-status-every",
            str(args.publish_status_every),
        ]
        if args.publish:
            run_args += ["--publish"]
        _dispatch_to_module_main(run, run_args)
        return

    if args.cmd == "dashboard":
        # Tkinter is only needed here.
        from .gui import main as run

        run_args = [
            "--mqtt-host",
            args.mqtt_host,
            "--mqtt-port",
            str(args.mqtt_port),
            "--namespace",
            args.namespace,
            "--refresh-ms",
            str(args.refresh_ms),
        ]
        _dispatch_to_module_main(run, run_args)
        return


def _dispatch_to_module_main(module_main, argv: list[str]) -> None:
    import sys

    old_argv = sys.argv[:]
    try:
        sys.argv = [old_argv[0], *argv]
        module_main()
    finally:
        sys.argv = old_argv


if __name__ == "__main__":
    main()
