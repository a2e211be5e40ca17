#!/usr/bin/env python3
"""
apply the resolved settings to the hub

Colors and fixed speeds are applied once. Zones in a quiet mode are
updated periodically until the stop event is set.
"""

import logging
import threading
import time

from feeph.unihub.core import UniHub
from feeph.unihub.protocol import ZONE_SETTLE_TIME
from feeph.unihub.settings import FanMode, ZoneSettings
from feeph.unihub.temperature import CpuTemperature, GpuTemperature, TemperatureSource, map_temp_to_rpm

LH = logging.getLogger('feeph.unihub')

POLL_INTERVAL = 5.0  # seconds


def default_sources() -> dict[FanMode, TemperatureSource]:
    return {
        FanMode.QUIET_CPU: CpuTemperature(),
        FanMode.QUIET_GPU: GpuTemperature(),
    }


class UpdateScheduler:

    def __init__(self, hub: UniHub, settings: list[ZoneSettings], sources: dict[FanMode, TemperatureSource] | None = None, interval: float = POLL_INTERVAL, rgb_sync: bool = False):
        self._hub = hub
        self._settings = sorted(settings, key=lambda s: s.zone)
        self._sources = sources if sources is not None else default_sources()
        self._interval = interval
        self._rgb_sync = rgb_sync

    @property
    def reactive_zones(self) -> list[ZoneSettings]:
        return [s for s in self._settings if s.mode.is_reactive]

    def run(self, stop_event: threading.Event | None = None):
        """
        apply all settings

        returns immediately if all zones use a fixed speed, otherwise
        keeps updating the quiet zones until stop_event is set
        """
        self.apply_colors()
        self.apply_fixed_speeds()
        reactive = self.reactive_zones
        if not reactive:
            LH.info("All fans use a fixed speed. Done.")
            return
        if stop_event is None:
            stop_event = threading.Event()
        zones = ", ".join(f"{s.zone} ({s.mode.value})" for s in reactive)
        LH.info("Following temperatures for fan %s every %.0fs.", zones, self._interval)
        for settings in reactive:
            self._hub.enable_manual_mode(settings.zone)
        while True:
            self.update_reactive_zones(reactive)
            if stop_event.wait(self._interval):
                LH.info("Stopped following temperatures.")
                break

    def apply_colors(self):
        if self._rgb_sync:
            self._hub.set_rgb_sync(enabled=True)
            return
        for settings in self._settings:
            r, g, b = settings.color
            self._hub.set_color(settings.zone, r, g, b, settings.brightness)

    def apply_fixed_speeds(self):
        for settings in self._settings:
            if settings.mode == FanMode.FIXED:
                self._hub.set_fixed_speed(settings.zone, settings.speed)
                time.sleep(ZONE_SETTLE_TIME)

    def update_reactive_zones(self, reactive: list[ZoneSettings]):
        """
        read each required temperature source once and update the zones
        """
        calibration = self._hub.calibration
        temperatures: dict[FanMode, float] = {}
        for settings in reactive:
            if settings.mode not in temperatures:
                temperatures[settings.mode] = self._sources[settings.mode].get_temperature()
            temperature = temperatures[settings.mode]
            rpm = map_temp_to_rpm(temperature, min_rpm=calibration.min_rpm, max_rpm=calibration.max_rpm)
            self._hub.set_speed(settings.zone, rpm)
            LH.info("Fan %i synced to %s temp %.1f°C -> %i RPM", settings.zone, self._sources[settings.mode].name, temperature, rpm)
