"""Tests for response buffer decoding."""

import pytest

from dawnpro_ctl.protocol.parser import (
    FILTER_NAMES,
    filter_name,
    gain_label,
    indicator_label,
    parse_filter,
    parse_gain,
    parse_indicator,
    parse_status,
    parse_volume,
)


def _buffer(**offsets) -> bytes:
    data = bytearray(7)
    for key, value in offsets.items():
        data[int(key[1:])] = value
    return bytes(data)


def test_get_all_example():
    """Decode filter 2, gain 100 and indicator 1 from a "get all" buffer."""
    data = bytes([0, 0, 0, 2, 100, 1, 0])
    assert parse_filter(data) == "Slow Roll Off Low Latency"
    assert parse_gain(data) == "High"
    assert parse_indicator(data) == "Temp off"


def test_volume_example():
    """Raw volume byte 110 at offset 4 decodes to level 10."""
    data = _buffer(o4=110)
    assert parse_volume(data) == 10


def test_volume_unknown_byte():
    """A byte missing from the volume table decodes to None."""
    assert parse_volume(_buffer(o4=111)) is None


def test_gain_labels():
    """Zero is low gain; anything else is high."""
    assert gain_label(0) == "Low"
    assert gain_label(1) == "High"
    assert gain_label(255) == "High"


def test_indicator_labels():
    """0 is on, 1 is temporarily off, everything else is off."""
    assert indicator_label(0) == "on"
    assert indicator_label(1) == "Temp off"
    assert indicator_label(2) == "Off"
    assert indicator_label(200) == "Off"


def test_filter_names():
    """All five filter indices should resolve."""
    assert len(FILTER_NAMES) == 5
    assert filter_name(0) == "Fast Roll Off Low Latency"
    assert filter_name(4) == "Non Oversampling"


def test_filter_index_out_of_range():
    """An unknown filter index should raise rather than index past the table."""
    with pytest.raises(ValueError, match="out of range"):
        filter_name(5)
    with pytest.raises(ValueError):
        parse_filter(_buffer(o3=17))


def test_short_buffer_rejected():
    """Buffers must be exactly 7 bytes."""
    with pytest.raises(ValueError):
        parse_volume(b"\x00\x00\x00")


def test_parse_status():
    """A status snapshot combines the two query responses."""
    all_data = bytes([0, 0, 0, 4, 0, 0, 0])
    volume_data = _buffer(o4=60)
    status = parse_status(all_data, volume_data)
    assert status.volume == 30
    assert status.volume_raw == 60
    assert status.filter == "Non Oversampling"
    assert status.filter_index == 4
    assert status.gain == "Low"
    assert status.indicator == "on"


def test_status_lines():
    """The status report prints one line per setting."""
    status = parse_status(bytes([0, 0, 0, 2, 100, 1, 0]), _buffer(o4=7))
    assert status.to_lines() == [
        "Volume: unknown",
        "Filter: Slow Roll Off Low Latency",
        "Gain: High",
        "Indicator: Temp off",
    ]


def test_status_to_dict():
    """to_dict should expose both decoded and raw values."""
    status = parse_status(bytes([0, 0, 0, 0, 1, 2, 0]), _buffer(o4=255))
    d = status.to_dict()
    assert d["volume"] == 0
    assert d["volume_raw"] == 255
    assert d["filter_index"] == 0
    assert d["gain"] == "High"
    assert d["indicator"] == "Off"
