"""Command-line interface: ``dawnpro get ...`` / ``dawnpro set ...``."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .device import DawnPro
from .protocol.commands import ATTRIBUTE_NAMES, Attribute
from .protocol.volume import MAX_LEVEL, MIN_LEVEL, to_raw
from .transport.usb_connection import (
    NO_TIMEOUT,
    PRODUCT_ID,
    VENDOR_ID,
    BackendUnavailableError,
    DeviceNotFoundError,
    USBConnection,
)

logger = logging.getLogger(__name__)

SET_TARGETS = tuple(ATTRIBUTE_NAMES)
GET_TARGETS = ("status",) + SET_TARGETS

EXIT_OK = 0
EXIT_ERROR = 1
# negated LIBUSB_ERROR_OTHER
EXIT_BACKEND_UNAVAILABLE = 99
EXIT_DEVICE_NOT_FOUND = -1


def _usb_id(text: str) -> int:
    try:
        value = int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid USB id: {text!r}")
    if not 0 <= value <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"USB id out of range: {text!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dawnpro",
        description="Control a Dawn Pro USB DAC.",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="increase logging verbosity (repeat for debug output)",
    )
    parser.add_argument(
        "--strict", action="store_true",
        help="exit with status 1 if any USB transfer fails",
    )
    parser.add_argument(
        "--vid", type=_usb_id, default=VENDOR_ID, metavar="VID",
        help=f"USB vendor ID (default {VENDOR_ID:#06x})",
    )
    parser.add_argument(
        "--pid", type=_usb_id, default=PRODUCT_ID, metavar="PID",
        help=f"USB product ID (default {PRODUCT_ID:#06x})",
    )
    parser.add_argument(
        "--timeout", type=int, default=NO_TIMEOUT, metavar="MS",
        help="control transfer timeout in milliseconds (0 waits forever)",
    )

    commands = parser.add_subparsers(dest="command", metavar="{get,set}")
    commands.required = True

    get_parser = commands.add_parser("get", help="read a setting")
    get_parser.add_argument("target", choices=GET_TARGETS)
    get_parser.add_argument(
        "--json", action="store_true", help="print the result as JSON"
    )

    set_parser = commands.add_parser("set", help="change a setting")
    set_parser.add_argument("target", choices=SET_TARGETS)
    set_parser.add_argument(
        "value", type=int,
        help=f"volume {MIN_LEVEL}-{MAX_LEVEL}, or a raw filter/gain/indicator code",
    )
    return parser


def _print_reading(target: str, value, as_json: bool) -> None:
    if as_json:
        print(json.dumps({target: value}))
    elif value is None:
        print("unknown")
    else:
        print(value)


def run_get(dac: DawnPro, target: str, as_json: bool = False) -> list[str]:
    """Read and print one setting (or all of them). Returns transfer errors."""
    if target == "status":
        reading = dac.get_status()
        if as_json:
            print(json.dumps(reading.value.to_dict()))
        else:
            for line in reading.value.to_lines():
                print(line)
        return reading.errors

    reading = dac.get(ATTRIBUTE_NAMES[target])
    _print_reading(target, reading.value, as_json)
    return reading.errors


def run_set(dac: DawnPro, target: str, value: int) -> list[str]:
    """Apply one setting. Returns transfer errors."""
    return dac.set(ATTRIBUTE_NAMES[target], value).errors


def check_set_value(target: str, value: int) -> None:
    """Reject values that cannot be encoded, before the device is opened."""
    if ATTRIBUTE_NAMES[target] is Attribute.VOLUME and to_raw(value) is None:
        raise ValueError(
            f"Volume must be {MIN_LEVEL}-{MAX_LEVEL}, got {value}"
        )


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level, stream=sys.stderr, format="%(levelname)s: %(message)s"
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    logger.debug("Using device %04x:%04x", args.vid, args.pid)

    if args.command == "set":
        try:
            check_set_value(args.target, args.value)
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return EXIT_ERROR

    connection = USBConnection(args.vid, args.pid, timeout_ms=args.timeout)
    try:
        with connection:
            dac = DawnPro(connection)
            if args.command == "get":
                errors = run_get(dac, args.target, args.json)
            else:
                errors = run_set(dac, args.target, args.value)
    except BackendUnavailableError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_BACKEND_UNAVAILABLE
    except DeviceNotFoundError:
        print("dac not connected", file=sys.stderr)
        return EXIT_DEVICE_NOT_FOUND
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if errors and args.strict:
        return EXIT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
