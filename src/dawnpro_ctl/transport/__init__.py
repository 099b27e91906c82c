"""Transport layer: USB control transfers to the DAC."""

from .usb_connection import TransferResult, USBConnection
