#!/usr/bin/env python3
"""
per-model protocol parameters for the Lian Li UNI HUB family

All supported controllers share the same USB vendor ID and differ in
the byte used to switch a channel to manual speed control, the byte
used to hand the LEDs to the motherboard and the RPM range the speed
byte is scaled to.
"""

import logging

from attrs import define, field

LH = logging.getLogger('feeph.unihub')


VENDOR_ID = 0x0CF2


def _check_rpm_range(instance, attribute, value):
    if not 0 < instance.min_rpm < value:
        raise ValueError(f"calibration requires 0 < min_rpm < max_rpm (got {instance.min_rpm}..{value})")


@define(frozen=True)
class ModelCalibration:
    model:     str
    mode_byte: int  # enable manual speed control
    sync_byte: int  # hand LED control to the motherboard ARGB header
    min_rpm:   int
    max_rpm:   int = field(validator=_check_rpm_range)


CALIBRATIONS = {
    #        model                     mode  sync  min RPM  max RPM
    # ----------------------------------------------------------------
    0xA100: ModelCalibration('UNI HUB SL',          0x31, 0x30,  805, 1900),
    0xA101: ModelCalibration('UNI HUB AL',          0x42, 0x41,  805, 1900),
    0xA102: ModelCalibration('UNI HUB SL Infinity', 0x62, 0x61,  250, 2000),
    0xA103: ModelCalibration('UNI HUB SL v2',       0x62, 0x61,  200, 2100),
    0xA104: ModelCalibration('UNI HUB AL v2',       0x62, 0x61,  200, 2100),
    0xA105: ModelCalibration('UNI HUB SL v2a',      0x62, 0x61,  200, 2100),
}

# unrecognized product IDs are treated like the original UNI HUB SL
DEFAULT_CALIBRATION = CALIBRATIONS[0xA100]

# the order matters: the first product ID that opens successfully wins
SUPPORTED_PRODUCT_IDS = list(CALIBRATIONS.keys())


def lookup(product_id: int) -> ModelCalibration:
    """
    get the calibration for the provided product ID

    falls back to the default calibration for unknown product IDs
    """
    calibration = CALIBRATIONS.get(product_id)
    if calibration is None:
        LH.warning("Unknown product ID 0x%04X. Using calibration for '%s'.", product_id, DEFAULT_CALIBRATION.model)
        return DEFAULT_CALIBRATION
    return calibration
