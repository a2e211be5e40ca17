#!/usr/bin/env python3
"""
frame layouts of the UNI HUB HID protocol

All frames start with report ID 0xE0. Handshake and confirmation
frames are sent as feature reports, everything else as regular output
reports. The functions in this module only build frames, sending them
(and waiting for the device to settle) is the job of UniHub.
"""

from feeph.unihub.calibration import ModelCalibration
from feeph.unihub.conversions import convert_rpm2byte, scale_channel
from feeph.unihub.errors import InvalidBrightness, InvalidZone

REPORT_ID = 0xE0

FAN_COUNT = 4               # independently addressable zones
LEDS_PER_FAN = 117
COLOR_FRAME_SIZE = 353      # 2 byte header + 117 * 3 byte color + padding
FEATURE_REPORT_SIZE = 65    # maximum size of a feature report read

# settle times (in seconds) required by the firmware after each write
INIT_SETTLE_TIME = 0.10
COLOR_SETTLE_TIME = 0.10
CONFIRM_SETTLE_TIME = 0.05
MANUAL_MODE_SETTLE_TIME = 0.20
SPEED_SETTLE_TIME = 0.10
SYNC_SETTLE_TIME = 0.20
ZONE_SETTLE_TIME = 0.20


def _pad(frame: list[int], size: int = 11) -> bytes:
    return bytes(frame + [0x00] * (size - len(frame)))


def validate_zone(zone: int):
    if not 0 <= zone < FAN_COUNT:
        raise InvalidZone(zone, FAN_COUNT)


def build_init_sequence() -> list[bytes]:
    """
    handshake sent once after opening the device
    (5 feature reports, 11 bytes each)
    """
    return [
        # fmt: off
        _pad([REPORT_ID, 0x50, 0x01]),
        _pad([REPORT_ID, 0x10, 0x32, 0x03]),  # zone 0
        _pad([REPORT_ID, 0x10, 0x32, 0x13]),  # zone 1
        _pad([REPORT_ID, 0x10, 0x32, 0x23]),  # zone 2
        _pad([REPORT_ID, 0x10, 0x32, 0x33]),  # zone 3
        # fmt: on
    ]


def build_color_frame(zone: int, r: int, g: int, b: int, brightness: float) -> bytes:
    """
    color frame for all LEDs of a zone

    The device expects the channels in R, B, G order!
    """
    validate_zone(zone)
    if not 0 <= brightness <= 100:
        raise InvalidBrightness(brightness)
    triple = [scale_channel(r, brightness), scale_channel(b, brightness), scale_channel(g, brightness)]
    frame = [REPORT_ID, 0x30 + zone] + triple * LEDS_PER_FAN
    return _pad(frame, size=COLOR_FRAME_SIZE)


def build_confirm_sequence(zone: int) -> list[bytes]:
    """
    feature reports which latch a previously sent color frame
    """
    validate_zone(zone)
    return [
        _pad([REPORT_ID, 0x10, 0x01]),
        _pad([REPORT_ID, 0x11, 0x01]),
        _pad([REPORT_ID, 0x60, 0x00, 0x01]),
    ]


def build_manual_mode_command(zone: int, mode_byte: int) -> bytes:
    """
    disable PWM (motherboard) control for the zone and accept speed
    commands instead
    """
    validate_zone(zone)
    return bytes([REPORT_ID, 0x10, mode_byte, 0x10 << zone])


def build_speed_command(zone: int, rpm: int, calibration: ModelCalibration) -> bytes:
    """
    set the zone's fan speed

    raises InvalidSpeedRange if the RPM is outside the calibrated range
    (the value is never clamped)
    """
    validate_zone(zone)
    speed_byte = convert_rpm2byte(rpm, min_rpm=calibration.min_rpm, max_rpm=calibration.max_rpm)
    return bytes([REPORT_ID, 0x20 + zone, 0x00, speed_byte])


def build_sync_command(sync_byte: int, enabled: bool) -> bytes:
    """
    hand the LEDs over to the motherboard's ARGB header (or take them back)
    """
    return bytes([REPORT_ID, 0x10, sync_byte, 0x01 if enabled else 0x00])
