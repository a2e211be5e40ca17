#!/usr/bin/env python3
"""
control the colors, brightness and fan speeds of a Lian Li UNI HUB

usage:
  - unihub --red 255 --green 0 --blue 0 --brightness 50 --speed 1200
  - unihub --mode quiet-cpu
  - unihub --config /etc/unihub/fans.toml
"""

import argparse
import logging
import signal
import sys
import threading

import colorama
import coloredlogs

from feeph.unihub.calibration import lookup
from feeph.unihub.config import load_config_or_defaults
from feeph.unihub.core import UniHub
from feeph.unihub.errors import UniHubError
from feeph.unihub.scheduler import UpdateScheduler
from feeph.unihub.settings import CliDefaults, FanMode, resolve_all
from feeph.unihub.transport import HidTransport

LH = logging.getLogger('feeph.unihub')

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


def byte_value(text: str) -> int:
    value = int(text)
    if not 0 <= value <= 255:
        raise argparse.ArgumentTypeError(f"{value} is out of range (0 ≤ x ≤ 255)")
    return value


def build_parser() -> argparse.ArgumentParser:
    defaults = CliDefaults()
    parser = argparse.ArgumentParser(prog='unihub', description="Control Lian Li fan colors, brightness, and speed (RPM or quiet modes)")
    parser.add_argument('--red', type=byte_value, default=defaults.red, help="red value (0-255)")
    parser.add_argument('--green', type=byte_value, default=defaults.green, help="green value (0-255)")
    parser.add_argument('--blue', type=byte_value, default=defaults.blue, help="blue value (0-255)")
    parser.add_argument('--brightness', type=float, default=defaults.brightness, help="brightness percentage (0-100)")
    parser.add_argument('--speed', type=int, default=defaults.speed, help="fan speed in RPM, ignored in quiet modes")
    parser.add_argument('--mode', type=FanMode, choices=list(FanMode), default=defaults.mode, metavar='{fixed,quiet-cpu,quiet-gpu}', help="fan mode")
    parser.add_argument('--config', type=str, default=None, help="path to config file (settings in the file override the command line)")
    parser.add_argument('--rgb-sync', action='store_true', help="let the motherboard control the LEDs")
    parser.add_argument('--log-level', type=str.upper, choices=LOG_LEVELS, default='INFO')
    parser.add_argument('-v', '--verbose', action='store_true', help="same as --log-level=DEBUG")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    verbosity = 'DEBUG' if args.verbose else args.log_level
    colorama.init()
    coloredlogs.install(level=verbosity, fmt='%(levelname).1s: %(message)s')

    cli_defaults = CliDefaults(red=args.red, green=args.green, blue=args.blue, brightness=args.brightness, speed=args.speed, mode=args.mode)
    config = load_config_or_defaults(args.config)

    stop_event = threading.Event()
    for signum in (signal.SIGINT, signal.SIGTERM):
        signal.signal(signum, lambda *_: stop_event.set())

    try:
        with HidTransport.open() as transport:
            hub = UniHub(transport=transport, calibration=lookup(transport.product_id))
            LH.info("Using %s", hub.describe_device())
            settings = resolve_all(config, cli_defaults, min_rpm=hub.calibration.min_rpm)
            for zone_settings in settings:
                LH.debug("fan %i: %s", zone_settings.zone, zone_settings)
            hub.initialize()
            scheduler = UpdateScheduler(hub=hub, settings=settings, rgb_sync=args.rgb_sync)
            scheduler.run(stop_event=stop_event)
    except UniHubError as e:
        LH.error("%s", e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
