#!/usr/bin/env python3
"""
interface to the UNI HUB

Every write is followed by a fixed settle time. The firmware silently
drops commands which arrive too early.
"""

import logging
import time

import feeph.unihub.protocol as protocol
from feeph.unihub.calibration import ModelCalibration
from feeph.unihub.errors import TransportError
from feeph.unihub.transport import HidTransport

LH = logging.getLogger('feeph.unihub')


class UniHub:

    def __init__(self, transport: HidTransport, calibration: ModelCalibration):
        self._transport = transport
        self.calibration = calibration

    def describe_device(self) -> str:
        cal = self.calibration
        return f"{cal.model} (0x{self._transport.product_id:04X}) ({cal.min_rpm}..{cal.max_rpm} RPM)"

    def initialize(self):
        """
        send the handshake

        the device's response is read for diagnostic purposes only,
        failing to read it is not an error
        """
        for frame in protocol.build_init_sequence():
            self._transport.send_feature_report(frame)
            time.sleep(protocol.INIT_SETTLE_TIME)
        try:
            response = self._transport.get_feature_report(protocol.REPORT_ID, protocol.FEATURE_REPORT_SIZE)
            LH.debug("Read %i bytes after init: %s", len(response), response.hex(' '))
        except TransportError as e:
            LH.warning("Failed to read feature report: %s. Skipping...", e)
        time.sleep(protocol.INIT_SETTLE_TIME)

    # ---------------------------------------------------------------------
    # lighting
    # ---------------------------------------------------------------------

    def set_color(self, zone: int, r: int, g: int, b: int, brightness: float):
        frame = protocol.build_color_frame(zone, r, g, b, brightness)
        confirm = protocol.build_confirm_sequence(zone)
        self._transport.write(frame)
        LH.info("Set fan %i to RGB(%i,%i,%i) at %.0f%% brightness", zone, r, g, b, brightness)
        time.sleep(protocol.COLOR_SETTLE_TIME)
        for cmd in confirm:
            self._transport.send_feature_report(cmd)
            time.sleep(protocol.CONFIRM_SETTLE_TIME)

    def set_rgb_sync(self, enabled: bool):
        self._transport.write(protocol.build_sync_command(self.calibration.sync_byte, enabled))
        LH.info("Motherboard RGB sync %s", "enabled" if enabled else "disabled")
        time.sleep(protocol.SYNC_SETTLE_TIME)

    # ---------------------------------------------------------------------
    # fan speed control
    # ---------------------------------------------------------------------

    def enable_manual_mode(self, zone: int):
        self._transport.write(protocol.build_manual_mode_command(zone, self.calibration.mode_byte))
        LH.debug("Set fan %i to manual mode", zone)
        time.sleep(protocol.MANUAL_MODE_SETTLE_TIME)

    def set_speed(self, zone: int, rpm: int):
        """
        set the fan speed (manual mode must be enabled)
        """
        self._transport.write(protocol.build_speed_command(zone, rpm, self.calibration))
        LH.info("Set fan %i speed to %i RPM", zone, rpm)
        time.sleep(protocol.SPEED_SETTLE_TIME)

    def set_fixed_speed(self, zone: int, rpm: int):
        """
        enable manual mode and set the fan speed
        """
        # validate before touching the device
        protocol.build_speed_command(zone, rpm, self.calibration)
        self.enable_manual_mode(zone)
        self.set_speed(zone, rpm)
