"""USB control-transfer connection to the Dawn Pro DAC.

The DAC exposes its settings through vendor-class control transfers
addressed to "other" recipient. A query is a two-phase exchange: the
opcode frame goes out with request ``0xA0``, then a 7-byte status buffer
is read back with request ``0xA1``. Mutations are a single OUT transfer.

Transfer failures do not abort the exchange. Each phase is attempted
exactly once; errors are logged and collected on the returned
:class:`TransferResult` so the caller decides whether they matter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import usb.core
import usb.util

from ..protocol.commands import MUTATE_FRAME_SIZE, QUERY_FRAME_SIZE
from ..protocol.parser import RESPONSE_SIZE

logger = logging.getLogger(__name__)

VENDOR_ID = 0x2FC6
PRODUCT_ID = 0xF06A

REQUEST_TYPE_WRITE = usb.util.build_request_type(
    usb.util.CTRL_OUT, usb.util.CTRL_TYPE_VENDOR, usb.util.CTRL_RECIPIENT_OTHER
)
REQUEST_TYPE_READ = usb.util.build_request_type(
    usb.util.CTRL_IN, usb.util.CTRL_TYPE_VENDOR, usb.util.CTRL_RECIPIENT_OTHER
)
REQUEST_ID_WRITE = 0xA0
REQUEST_ID_READ = 0xA1
REQUEST_VALUE = 0x0000
REQUEST_INDEX = 0x09A0
# 0 = block until the transfer completes
NO_TIMEOUT = 0


class DeviceNotFoundError(ConnectionError):
    """No device with the expected vendor/product ID is attached."""


class BackendUnavailableError(ConnectionError):
    """pyusb could not load a libusb backend."""


class TransferError(IOError):
    """One or more control transfers failed."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("Transfer failed: " + "; ".join(errors))
        self.errors = errors


@dataclass
class TransferResult:
    """Outcome of a read or write exchange.

    ``data`` is always the full response buffer for reads (zero filled
    where the device did not answer) and empty for writes.
    """

    data: bytes = b""
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise TransferError(self.errors)


# libusb_error codes as reported by the libusb1 backend
LIBUSB_ERROR_NAMES = {
    -1: "LIBUSB_ERROR_IO",
    -2: "LIBUSB_ERROR_INVALID_PARAM",
    -3: "LIBUSB_ERROR_ACCESS",
    -4: "LIBUSB_ERROR_NO_DEVICE",
    -5: "LIBUSB_ERROR_NOT_FOUND",
    -6: "LIBUSB_ERROR_BUSY",
    -7: "LIBUSB_ERROR_TIMEOUT",
    -8: "LIBUSB_ERROR_OVERFLOW",
    -9: "LIBUSB_ERROR_PIPE",
    -10: "LIBUSB_ERROR_INTERRUPTED",
    -11: "LIBUSB_ERROR_NO_MEM",
    -12: "LIBUSB_ERROR_NOT_SUPPORTED",
    -99: "LIBUSB_ERROR_OTHER",
}


def _error_name(error: usb.core.USBError) -> str:
    name = LIBUSB_ERROR_NAMES.get(error.backend_error_code)
    if name is not None:
        return name
    return error.strerror or str(error)


class USBConnection:
    """Owns the USB session with one DAC.

    Usage::

        with USBConnection() as conn:
            result = conn.read(build_get_all())
            conn.write(build_set_gain(1))
    """

    def __init__(
        self,
        vendor_id: int = VENDOR_ID,
        product_id: int = PRODUCT_ID,
        timeout_ms: int = NO_TIMEOUT,
    ) -> None:
        self._vendor_id = vendor_id
        self._product_id = product_id
        self._timeout_ms = timeout_ms
        self._device = None

    @property
    def connected(self) -> bool:
        return self._device is not None

    def open(self) -> None:
        """Locate the DAC by vendor/product ID.

        Raises:
            BackendUnavailableError: If no libusb backend is available.
            DeviceNotFoundError: If the device is not attached.
        """
        try:
            device = usb.core.find(
                idVendor=self._vendor_id, idProduct=self._product_id
            )
        except usb.core.NoBackendError as e:
            raise BackendUnavailableError(
                "Could not initialize libusb. Is the libusb library installed?"
            ) from e

        if device is None:
            raise DeviceNotFoundError(
                f"No device {self._vendor_id:#06x}:{self._product_id:#06x} found"
            )

        self._device = device
        logger.info(
            "Opened device %04x:%04x", self._vendor_id, self._product_id
        )

    def close(self) -> None:
        """Release the USB session. Safe to call more than once."""
        if self._device is None:
            return

        try:
            usb.util.dispose_resources(self._device)
        except usb.core.USBError as e:
            logger.warning("Error closing device: %s", e)
        finally:
            self._device = None
            logger.info("Closed device")

    def __enter__(self) -> USBConnection:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_device(self):
        if self._device is None:
            raise ConnectionError("Not connected to device")
        return self._device

    def _send(self, frame: bytes, errors: list[str]) -> None:
        device = self._require_device()
        logger.debug("OUT %s", frame.hex(" "))
        try:
            device.ctrl_transfer(
                REQUEST_TYPE_WRITE,
                REQUEST_ID_WRITE,
                REQUEST_VALUE,
                REQUEST_INDEX,
                frame,
                timeout=self._timeout_ms,
            )
        except usb.core.USBError as e:
            name = _error_name(e)
            logger.error("Error submitting transfer: %s", name)
            errors.append(name)

    def read(self, frame: bytes) -> TransferResult:
        """Send a 3-byte query and read back the 7-byte response.

        The read phase runs even if the write phase failed.

        Raises:
            ConnectionError: If not connected.
            ValueError: If ``frame`` is not a query frame.
        """
        if len(frame) != QUERY_FRAME_SIZE:
            raise ValueError(
                f"Query frame must be {QUERY_FRAME_SIZE} bytes, got {len(frame)}"
            )

        errors: list[str] = []
        self._send(frame, errors)

        data = bytearray(RESPONSE_SIZE)
        device = self._require_device()
        try:
            received = device.ctrl_transfer(
                REQUEST_TYPE_READ,
                REQUEST_ID_READ,
                REQUEST_VALUE,
                REQUEST_INDEX,
                RESPONSE_SIZE,
                timeout=self._timeout_ms,
            )
        except usb.core.USBError as e:
            name = _error_name(e)
            logger.error("Error submitting transfer: %s", name)
            errors.append(name)
        else:
            received = bytes(received)[:RESPONSE_SIZE]
            data[: len(received)] = received
            logger.debug("IN  %s", received.hex(" "))

        return TransferResult(data=bytes(data), errors=errors)

    def write(self, frame: bytes) -> TransferResult:
        """Send a 4-byte mutation frame; the device sends nothing back.

        Raises:
            ConnectionError: If not connected.
            ValueError: If ``frame`` is not a mutation frame.
        """
        if len(frame) != MUTATE_FRAME_SIZE:
            raise ValueError(
                f"Mutation frame must be {MUTATE_FRAME_SIZE} bytes, got {len(frame)}"
            )

        errors: list[str] = []
        self._send(frame, errors)
        return TransferResult(errors=errors)
