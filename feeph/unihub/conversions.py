#!/usr/bin/env python3
"""
conversion-related functions
"""

import math

from feeph.unihub.errors import InvalidBrightness, InvalidHexColor, InvalidSpeedRange


def scale_channel(value: int, brightness: float) -> int:
    """
    scale a color channel by the provided brightness percentage
    (255 @ 50% -> 128)
    """
    if not 0 <= brightness <= 100:
        raise InvalidBrightness(brightness)
    return min(math.floor(value * brightness / 100 + 0.5), 255)


def parse_hex_color(value: str) -> tuple[int, int, int]:
    """
    convert a hex color string to an RGB triple
    ('#A1B2C3' -> (0xA1, 0xB2, 0xC3))
    """
    digits = value.removeprefix('#')
    if len(digits) != 6 or any(c not in '0123456789abcdefABCDEF' for c in digits):
        raise InvalidHexColor(value)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def convert_rpm2byte(rpm: int, min_rpm: int, max_rpm: int) -> int:
    """
    convert the provided RPM value to the speed byte used by the hub
    (min_rpm -> 0x01, max_rpm -> 0xFF)

    0x00 is never used since the firmware may interpret it as a request
    for automatic speed control
    """
    if not min_rpm <= rpm <= max_rpm:
        raise InvalidSpeedRange(rpm, min_rpm, max_rpm)
    return 1 + round((rpm - min_rpm) * 254 / (max_rpm - min_rpm))
