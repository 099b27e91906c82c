"""Decoded device status model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class DeviceStatus:
    """Snapshot of all readable DAC settings."""

    volume: int | None
    volume_raw: int
    filter_index: int
    filter: str
    gain: str
    indicator: str

    def to_dict(self) -> dict:
        return {
            "volume": self.volume,
            "volume_raw": self.volume_raw,
            "filter": self.filter,
            "filter_index": self.filter_index,
            "gain": self.gain,
            "indicator": self.indicator,
        }

    def to_lines(self) -> list[str]:
        volume = "unknown" if self.volume is None else str(self.volume)
        return [
            f"Volume: {volume}",
            f"Filter: {self.filter}",
            f"Gain: {self.gain}",
            f"Indicator: {self.indicator}",
        ]
