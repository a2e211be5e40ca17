#!/usr/bin/env python3
"""
exclusive access to the hub's HID interface

this is a thin wrapper around hidapi which converts its various failure
modes (exceptions, negative return values) into TransportError
"""

import logging

# module hid provides no type hints
import hid  # type: ignore

from feeph.unihub.calibration import SUPPORTED_PRODUCT_IDS, VENDOR_ID
from feeph.unihub.errors import DeviceNotFound, TransportError
from feeph.unihub.protocol import FEATURE_REPORT_SIZE

LH = logging.getLogger('feeph.unihub')


class HidTransport:
    """
    an open HID device handle

    Use HidTransport.open() to find and open the hub. The handle is
    owned exclusively by this object, close it when done (or use it as a
    context manager).
    """

    def __init__(self, device, vendor_id: int, product_id: int):
        self._device = device
        self.vendor_id = vendor_id
        self.product_id = product_id

    @classmethod
    def open(cls, vendor_id: int = VENDOR_ID, product_ids: list[int] | None = None) -> 'HidTransport':
        """
        open the first supported device

        product IDs are tried in order, raises DeviceNotFound if none
        of them could be opened
        """
        if product_ids is None:
            product_ids = SUPPORTED_PRODUCT_IDS
        for product_id in product_ids:
            device = hid.device()
            try:
                device.open(vendor_id, product_id)
            except (OSError, ValueError) as e:
                LH.debug("Unable to open VID:%04X PID:%04X: %s", vendor_id, product_id, e)
                continue
            LH.info("Connected to device VID:%04X PID:%04X", vendor_id, product_id)
            return cls(device=device, vendor_id=vendor_id, product_id=product_id)
        raise DeviceNotFound(vendor_id=vendor_id, product_ids=product_ids)

    def write(self, data: bytes):
        try:
            result = self._device.write(data)
        except (OSError, ValueError) as e:
            raise TransportError(f"unable to write {len(data)} bytes: {e}") from e
        if result < 0:
            raise TransportError(f"unable to write {len(data)} bytes (result: {result})")
        LH.debug("write: %s", _format_frame(data))

    def send_feature_report(self, data: bytes):
        try:
            result = self._device.send_feature_report(data)
        except (OSError, ValueError) as e:
            raise TransportError(f"unable to send feature report: {e}") from e
        if result < 0:
            raise TransportError(f"unable to send feature report (result: {result})")
        LH.debug("feature report: %s", _format_frame(data))

    def get_feature_report(self, report_id: int, max_length: int = FEATURE_REPORT_SIZE) -> bytes:
        if not 0 < max_length <= FEATURE_REPORT_SIZE:
            raise ValueError(f"read buffer size {max_length} is out of range (0 < x ≤ {FEATURE_REPORT_SIZE})")
        try:
            data = self._device.get_feature_report(report_id, max_length)
        except (OSError, ValueError) as e:
            raise TransportError(f"unable to read feature report 0x{report_id:02X}: {e}") from e
        return bytes(data)

    def close(self):
        LH.debug("Closing device VID:%04X PID:%04X", self.vendor_id, self.product_id)
        self._device.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def _format_frame(data: bytes, limit: int = 16) -> str:
    text = data[:limit].hex(' ')
    if len(data) > limit:
        text += f" ... ({len(data)} bytes)"
    return text
