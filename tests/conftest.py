"""Shared fixtures: a fake DAC behind a patched ``usb.core.find``."""

from __future__ import annotations

from array import array
from unittest.mock import MagicMock, patch

import pytest


class FakeDac:
    """Answers control transfers the way the DAC does.

    ``responses`` maps a 3-byte query to the 7-byte buffer returned for it.
    Mutation frames are recorded in ``writes``.
    """

    def __init__(self) -> None:
        self.responses: dict[bytes, bytes] = {}
        self.writes: list[bytes] = []
        self.fail_with = None
        self._last_query = b""
        self.device = MagicMock()
        self.device.ctrl_transfer.side_effect = self._ctrl_transfer

    def _ctrl_transfer(self, request_type, request, value, index, data, timeout=None):
        if self.fail_with is not None:
            raise self.fail_with
        if request_type & 0x80:
            return array("B", self.responses.get(self._last_query, bytes(7)))
        frame = bytes(data)
        if len(frame) == 3:
            self._last_query = frame
        else:
            self.writes.append(frame)
        return len(frame)


@pytest.fixture
def fake_dac():
    dac = FakeDac()
    with patch("usb.core.find", return_value=dac.device), \
            patch("usb.util.dispose_resources"):
        yield dac
