"""Data models for decoded device state."""

from .status import DeviceStatus
