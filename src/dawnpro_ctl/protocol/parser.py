"""Response parsing for the 7-byte status buffer.

Layout (offsets not listed are unused)::

    offset  3        4                     5
            filter   volume | gain         indicator

Offset 4 holds the volume byte when the buffer answers a volume query and
the gain byte when it answers a "get all" query.
"""

from __future__ import annotations

from ..models.status import DeviceStatus
from .commands import Attribute
from .volume import to_normal

RESPONSE_SIZE = 7

FILTER_NAMES: tuple[str, ...] = (
    "Fast Roll Off Low Latency",
    "Fast Roll Off Phase Compensated",
    "Slow Roll Off Low Latency",
    "Slow Roll Off Phase Compensated",
    "Non Oversampling",
)


def _byte_at(data: bytes, attribute: Attribute) -> int:
    if len(data) != RESPONSE_SIZE:
        raise ValueError(
            f"Response must be {RESPONSE_SIZE} bytes, got {len(data)}"
        )
    return data[attribute.offset]


def filter_name(index: int) -> str:
    """Look up the human-readable filter name for a raw filter index."""
    if not 0 <= index < len(FILTER_NAMES):
        raise ValueError(f"Filter index out of range: {index}")
    return FILTER_NAMES[index]


def gain_label(raw: int) -> str:
    return "Low" if raw == 0 else "High"


def indicator_label(raw: int) -> str:
    if raw == 0:
        return "on"
    if raw == 1:
        return "Temp off"
    return "Off"


def parse_volume(data: bytes) -> int | None:
    """Decode the normalized volume from a volume-query response.

    Returns ``None`` if the raw byte is not one the firmware uses.
    """
    return to_normal(_byte_at(data, Attribute.VOLUME))


def parse_filter(data: bytes) -> str:
    """Decode the filter name from a "get all" response."""
    return filter_name(_byte_at(data, Attribute.FILTER))


def parse_gain(data: bytes) -> str:
    """Decode the gain level from a "get all" response."""
    return gain_label(_byte_at(data, Attribute.GAIN))


def parse_indicator(data: bytes) -> str:
    """Decode the indicator state from a "get all" response."""
    return indicator_label(_byte_at(data, Attribute.INDICATOR))


def parse_status(all_data: bytes, volume_data: bytes) -> DeviceStatus:
    """Combine a "get all" response and a volume response into a snapshot.

    Args:
        all_data: Buffer returned for the "get all" query.
        volume_data: Buffer returned for the volume query.
    """
    return DeviceStatus(
        volume=parse_volume(volume_data),
        volume_raw=_byte_at(volume_data, Attribute.VOLUME),
        filter_index=_byte_at(all_data, Attribute.FILTER),
        filter=parse_filter(all_data),
        gain=parse_gain(all_data),
        indicator=parse_indicator(all_data),
    )
