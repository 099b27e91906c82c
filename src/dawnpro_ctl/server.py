"""MCP server entry point for the Dawn Pro DAC.

Exposes the status report and every per-setting read and write as tools
over the Model Context Protocol using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .device import DawnPro
from .protocol.commands import Attribute
from .protocol.parser import FILTER_NAMES, gain_label
from .protocol.volume import MAX_LEVEL, MIN_LEVEL
from .transport.usb_connection import TransferResult, USBConnection

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "dawnpro",
    instructions="MCP server for the Dawn Pro USB DAC",
)

# Global connection state
_connection: USBConnection | None = None


def _get_device() -> DawnPro:
    """Get a controller for the active connection, raising if not connected."""
    if _connection is None or not _connection.connected:
        raise RuntimeError(
            "Not connected to device. Use the 'connect' tool first."
        )
    return DawnPro(_connection)


def _write_result(result: TransferResult, **fields: Any) -> dict[str, Any]:
    response: dict[str, Any] = {"ok": result.ok, **fields}
    if result.errors:
        response["errors"] = result.errors
    return response


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect() -> dict[str, Any]:
    """Open a USB session with the Dawn Pro DAC.

    Discovers the device by USB vendor/product ID (0x2fc6:0xf06a).
    """
    global _connection
    if _connection is not None and _connection.connected:
        return {"connected": True, "message": "Already connected"}

    connection = USBConnection()
    try:
        connection.open()
    except ConnectionError as e:
        return {"connected": False, "error": str(e)}

    _connection = connection
    return {"connected": True}


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the USB session with the DAC."""
    global _connection
    if _connection is None:
        return {"disconnected": True}
    _connection.close()
    _connection = None
    return {"disconnected": True}


# ─── SETTINGS TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def get_status() -> dict[str, Any]:
    """Read volume, filter, gain and indicator state in one call."""
    dac = _get_device()
    try:
        reading = dac.get_status()
    except ValueError as e:
        return {"error": str(e)}

    result = reading.value.to_dict()
    if reading.errors:
        result["errors"] = reading.errors
    return result


def _read_result(name: str, attribute: Attribute) -> dict[str, Any]:
    try:
        reading = _get_device().get(attribute)
    except ValueError as e:
        return {"error": str(e)}

    result: dict[str, Any] = {name: reading.value}
    if reading.errors:
        result["errors"] = reading.errors
    return result


@mcp.tool()
def get_volume() -> dict[str, Any]:
    """Read the current volume on the 0-60 scale."""
    return _read_result("volume", Attribute.VOLUME)


@mcp.tool()
def get_filter() -> dict[str, Any]:
    """Read the name of the active reconstruction filter."""
    return _read_result("filter", Attribute.FILTER)


@mcp.tool()
def get_gain() -> dict[str, Any]:
    """Read the output gain ("Low" or "High")."""
    return _read_result("gain", Attribute.GAIN)


@mcp.tool()
def get_indicator() -> dict[str, Any]:
    """Read the indicator LED state ("on", "Temp off" or "Off")."""
    return _read_result("indicator", Attribute.INDICATOR)


@mcp.tool()
def set_volume(volume: int) -> dict[str, Any]:
    """Set the volume.

    Args:
        volume: Level 0-60 (0 is quietest).
    """
    if not MIN_LEVEL <= volume <= MAX_LEVEL:
        return {"error": f"Volume must be {MIN_LEVEL}-{MAX_LEVEL}"}
    return _write_result(_get_device().set_volume(volume), volume=volume)


@mcp.tool()
def set_filter(filter_index: int) -> dict[str, Any]:
    """Select the DAC reconstruction filter.

    Args:
        filter_index: Index into the filter catalog (0-4).
    """
    if not 0 <= filter_index < len(FILTER_NAMES):
        return {"error": f"Filter index must be 0-{len(FILTER_NAMES) - 1}"}
    return _write_result(
        _get_device().set_filter(filter_index),
        filter=FILTER_NAMES[filter_index],
    )


@mcp.tool()
def set_gain(value: int) -> dict[str, Any]:
    """Switch the output gain.

    Args:
        value: Raw gain code, 0 = low, anything else = high.
    """
    return _write_result(_get_device().set_gain(value), gain=gain_label(value & 0xFF))


@mcp.tool()
def set_indicator(value: int) -> dict[str, Any]:
    """Set the indicator LED mode.

    Args:
        value: 0 = on, 1 = temporarily off, 2 = off.
    """
    if not 0 <= value <= 2:
        return {"error": "Indicator must be 0-2"}
    return _write_result(_get_device().set_indicator(value), indicator=value)


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("dawnpro://device/status")
def resource_device_status() -> str:
    """Connection state."""
    connected = _connection is not None and _connection.connected
    return json.dumps({"connected": connected})


@mcp.resource("dawnpro://catalog/filters")
def resource_filter_catalog() -> str:
    """List of filter names with their indices."""
    filters = [{"id": i, "name": name} for i, name in enumerate(FILTER_NAMES)]
    return json.dumps({"filters": filters, "count": len(filters)})


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
