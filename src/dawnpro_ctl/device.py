"""High-level DAC operations built on the protocol and transport layers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .models.status import DeviceStatus
from .protocol.commands import (
    Attribute,
    build_get_all,
    build_get_volume,
    build_set_filter,
    build_set_gain,
    build_set_indicator,
    build_set_volume,
)
from .protocol.parser import (
    parse_filter,
    parse_gain,
    parse_indicator,
    parse_status,
    parse_volume,
)
from .transport.usb_connection import TransferResult, USBConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Reading(Generic[T]):
    """A decoded value plus any transfer errors hit while reading it.

    When ``errors`` is non-empty the value was decoded from a buffer the
    device may not have filled.
    """

    value: T
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class DawnPro:
    """Reads and changes DAC settings over an open :class:`USBConnection`."""

    def __init__(self, connection: USBConnection) -> None:
        self._conn = connection

    def _read_all(self) -> TransferResult:
        return self._conn.read(build_get_all())

    def _read_volume(self) -> TransferResult:
        return self._conn.read(build_get_volume())

    def get_status(self) -> Reading[DeviceStatus]:
        all_result = self._read_all()
        volume_result = self._read_volume()
        status = parse_status(all_result.data, volume_result.data)
        return Reading(status, all_result.errors + volume_result.errors)

    def get_volume(self) -> Reading[int | None]:
        result = self._read_volume()
        return Reading(parse_volume(result.data), result.errors)

    def get_filter(self) -> Reading[str]:
        result = self._read_all()
        return Reading(parse_filter(result.data), result.errors)

    def get_gain(self) -> Reading[str]:
        result = self._read_all()
        return Reading(parse_gain(result.data), result.errors)

    def get_indicator(self) -> Reading[str]:
        result = self._read_all()
        return Reading(parse_indicator(result.data), result.errors)

    def set_volume(self, level: int) -> TransferResult:
        logger.info("Setting volume to %d", level)
        return self._conn.write(build_set_volume(level))

    def set_filter(self, value: int) -> TransferResult:
        logger.info("Setting filter to %d", value)
        return self._conn.write(build_set_filter(value))

    def set_gain(self, value: int) -> TransferResult:
        logger.info("Setting gain to %d", value)
        return self._conn.write(build_set_gain(value))

    def set_indicator(self, value: int) -> TransferResult:
        logger.info("Setting indicator to %d", value)
        return self._conn.write(build_set_indicator(value))

    def get(self, attribute: Attribute) -> Reading:
        """Read one attribute by its :class:`Attribute` key."""
        getters = {
            Attribute.VOLUME: self.get_volume,
            Attribute.FILTER: self.get_filter,
            Attribute.GAIN: self.get_gain,
            Attribute.INDICATOR: self.get_indicator,
        }
        return getters[attribute]()

    def set(self, attribute: Attribute, value: int) -> TransferResult:
        """Write one attribute by its :class:`Attribute` key."""
        setters = {
            Attribute.VOLUME: self.set_volume,
            Attribute.FILTER: self.set_filter,
            Attribute.GAIN: self.set_gain,
            Attribute.INDICATOR: self.set_indicator,
        }
        return setters[attribute](value)
