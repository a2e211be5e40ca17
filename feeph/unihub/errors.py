#!/usr/bin/env python3
"""
exceptions raised by feeph.unihub

validation and transport errors are fatal, configuration errors are
handled by falling back to the command line defaults
"""


class UniHubError(Exception):
    pass


class DeviceNotFound(UniHubError):

    def __init__(self, vendor_id: int, product_ids: list[int]):
        self.vendor_id = vendor_id
        self.product_ids = product_ids
        pids = ", ".join(f"0x{pid:04X}" for pid in product_ids)
        super().__init__(f"no supported device found (VID: 0x{vendor_id:04X}, PIDs: {pids})")


class TransportError(UniHubError):
    pass


# ---------------------------------------------------------------------
# validation errors
# ---------------------------------------------------------------------

class ValidationError(UniHubError, ValueError):
    pass


class InvalidZone(ValidationError):

    def __init__(self, zone: int, zone_count: int):
        self.zone = zone
        self.zone_count = zone_count
        super().__init__(f"invalid fan zone {zone} (0 ≤ x < {zone_count})")


class InvalidBrightness(ValidationError):

    def __init__(self, brightness: float):
        self.brightness = brightness
        super().__init__(f"invalid brightness {brightness} (0 ≤ x ≤ 100%)")


class InvalidSpeedRange(ValidationError):

    def __init__(self, rpm: int, min_rpm: int, max_rpm: int):
        self.rpm = rpm
        self.min_rpm = min_rpm
        self.max_rpm = max_rpm
        super().__init__(f"invalid speed {rpm} RPM (must be between {min_rpm} and {max_rpm})")


class InvalidHexColor(ValidationError):

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid hex color '{value}' (expected 6 hex digits, e.g. '#FF0505')")


# ---------------------------------------------------------------------
# configuration errors
# ---------------------------------------------------------------------

class ConfigError(UniHubError):
    pass


class ConfigParseError(ConfigError):
    pass
