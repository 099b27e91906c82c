"""Attribute opcodes and command frame builders.

Every frame starts with a 3-byte opcode triplet. Queries are sent as the
bare triplet; mutations append one raw value byte::

    +---------+---------+---------+---------+
    |  0xC0   |  0xA5   | opcode  |  value  |
    +---------+---------+---------+---------+
     query: bytes 0-2       mutate: bytes 0-3
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .volume import MAX_LEVEL, MIN_LEVEL, to_raw

QUERY_FRAME_SIZE = 3
MUTATE_FRAME_SIZE = 4

GET_ALL = b"\xC0\xA5\xA3"
GET_VOLUME = b"\xC0\xA5\xA2"
SET_FILTER = b"\xC0\xA5\x01"
SET_GAIN = b"\xC0\xA5\x02"
SET_VOLUME = b"\xC0\xA5\x04"
SET_INDICATOR = b"\xC0\xA5\x06"


@dataclass(frozen=True)
class AttributeSpec:
    """Opcodes and response offset for one device attribute."""

    get_opcode: bytes
    set_opcode: bytes
    offset: int


class Attribute(Enum):
    """Readable/settable DAC attributes.

    Volume is queried with its own opcode; the other three come back
    together in a single "get all" response.
    """

    VOLUME = AttributeSpec(GET_VOLUME, SET_VOLUME, 4)
    FILTER = AttributeSpec(GET_ALL, SET_FILTER, 3)
    GAIN = AttributeSpec(GET_ALL, SET_GAIN, 4)
    INDICATOR = AttributeSpec(GET_ALL, SET_INDICATOR, 5)

    @property
    def get_opcode(self) -> bytes:
        return self.value.get_opcode

    @property
    def set_opcode(self) -> bytes:
        return self.value.set_opcode

    @property
    def offset(self) -> int:
        return self.value.offset


# Mapping from CLI/tool names to attributes
ATTRIBUTE_NAMES: dict[str, Attribute] = {
    "volume": Attribute.VOLUME,
    "filter": Attribute.FILTER,
    "gain": Attribute.GAIN,
    "indicator": Attribute.INDICATOR,
}


def build_get(attribute: Attribute) -> bytes:
    """Build the 3-byte query frame for an attribute."""
    return attribute.get_opcode


def build_set(attribute: Attribute, raw_value: int) -> bytes:
    """Build a 4-byte mutation frame carrying ``raw_value``.

    The value is truncated to a single byte and sent without further
    checks; the firmware decides what to do with unknown codes.
    """
    return attribute.set_opcode + bytes([raw_value & 0xFF])


def build_get_all() -> bytes:
    """Build the "get all" query (filter, gain and indicator)."""
    return GET_ALL


def build_get_volume() -> bytes:
    """Build the volume query."""
    return build_get(Attribute.VOLUME)


def build_set_volume(level: int) -> bytes:
    """Build a volume mutation frame.

    Args:
        level: Normalized volume 0-60.
    """
    raw = to_raw(level)
    if raw is None:
        raise ValueError(
            f"Volume must be {MIN_LEVEL}-{MAX_LEVEL}, got {level}"
        )
    return build_set(Attribute.VOLUME, raw)


def build_set_filter(value: int) -> bytes:
    """Build a filter mutation frame (raw filter index)."""
    return build_set(Attribute.FILTER, value)


def build_set_gain(value: int) -> bytes:
    """Build a gain mutation frame (0 = low, nonzero = high)."""
    return build_set(Attribute.GAIN, value)


def build_set_indicator(value: int) -> bytes:
    """Build an indicator mutation frame (0 = on, 1 = temp off, else off)."""
    return build_set(Attribute.INDICATOR, value)
