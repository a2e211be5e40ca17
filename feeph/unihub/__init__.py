#!/usr/bin/env python3
"""
control a Lian Li UNI HUB (colors, brightness and fan speeds) via USB HID

The main design goal is to keep the protocol details (frame layouts,
per-model calibration, settle times) in one place and make everything
else testable without a physical device.
"""

# typical usage scenarios
# =======================

# set all fans to a fixed color and speed
# -------------------------------------------------------------------------
# from feeph.unihub import HidTransport, UniHub, lookup
#
# with HidTransport.open() as transport:
#     hub = UniHub(transport=transport, calibration=lookup(transport.product_id))
#     hub.initialize()
#     for zone in range(4):
#         hub.set_color(zone, r=255, g=0, b=0, brightness=50)
#         hub.set_fixed_speed(zone, rpm=1200)
# -------------------------------------------------------------------------

# follow the CPU temperature until interrupted
# -------------------------------------------------------------------------
# import threading
#
# from feeph.unihub import CliDefaults, FanMode, HubConfig, UpdateScheduler, resolve_all
#
# settings = resolve_all(HubConfig(), CliDefaults(mode=FanMode.QUIET_CPU), min_rpm=hub.calibration.min_rpm)
# stop_event = threading.Event()
# UpdateScheduler(hub=hub, settings=settings).run(stop_event=stop_event)
# -------------------------------------------------------------------------

# the following imports are provided for user convenience
# flake8: noqa: F401
from feeph.unihub.calibration import CALIBRATIONS, DEFAULT_CALIBRATION, SUPPORTED_PRODUCT_IDS, VENDOR_ID, ModelCalibration, lookup
from feeph.unihub.config import load_config, load_config_or_defaults
from feeph.unihub.conversions import parse_hex_color
from feeph.unihub.core import UniHub
from feeph.unihub.errors import ConfigError, ConfigParseError, DeviceNotFound, InvalidBrightness, InvalidHexColor, InvalidSpeedRange, InvalidZone, TransportError, UniHubError, ValidationError
from feeph.unihub.protocol import FAN_COUNT
from feeph.unihub.scheduler import UpdateScheduler
from feeph.unihub.settings import CliDefaults, ConfigLayer, FanMode, HubConfig, ZoneSettings, resolve, resolve_all
from feeph.unihub.temperature import CpuTemperature, GpuTemperature, TemperatureSource, get_cpu_temp, get_gpu_temp, map_temp_to_rpm
from feeph.unihub.transport import HidTransport
