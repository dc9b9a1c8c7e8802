from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from .config import get_settings
from .errors import IdGenError
from .generator import get_generator
from .layout import decode, format_id
from .logging_config import configure_logging


def _parse_id(raw: str) -> int:
    try:
        return int(raw, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer id: {raw!r}") from exc


def _parse_zone(raw: str) -> ZoneInfo:
    try:
        return ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise argparse.ArgumentTypeError(f"unknown time zone: {raw!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flakeid", description="Mint and inspect 64-bit snowflake ids.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    mint = subparsers.add_parser("mint", help="Mint new ids")
    mint.add_argument("-n", "--count", type=int, default=1)
    mint.add_argument("--datacenter-id", type=int, default=None)
    mint.add_argument("--machine-id", type=int, default=None)
    mint.add_argument("--format", action="store_true", help="Print the readable form next to each id")

    decode_cmd = subparsers.add_parser("decode", help="Print the fields of ids as json")
    decode_cmd.add_argument("ids", nargs="+", type=_parse_id)

    format_cmd = subparsers.add_parser("format", help="Print ids in readable form")
    format_cmd.add_argument("ids", nargs="+", type=_parse_id)
    format_cmd.add_argument("--tz", type=_parse_zone, default=None, help="IANA zone name, UTC by default")

    describe = subparsers.add_parser("describe", help="Print layout parameters and generator state")
    describe.add_argument("--datacenter-id", type=int, default=None)
    describe.add_argument("--machine-id", type=int, default=None)
    return parser


def _handle_mint(options: argparse.Namespace) -> None:
    if options.count < 1:
        raise argparse.ArgumentTypeError("--count must be at least 1")
    generator = get_generator(options.datacenter_id, options.machine_id)
    for _ in range(options.count):
        value = generator.mint()
        if options.format:
            print(f"{value}\t{format_id(value)}")
        else:
            print(value)


def _handle_decode(options: argparse.Namespace) -> None:
    for value in options.ids:
        print(json.dumps({"id": value, **decode(value).as_dict()}))


def _handle_format(options: argparse.Namespace) -> None:
    for value in options.ids:
        print(format_id(value, options.tz))


def _handle_describe(options: argparse.Namespace) -> None:
    generator = get_generator(options.datacenter_id, options.machine_id)
    print(json.dumps(generator.describe(), indent=2))


HANDLERS = {
    "mint": _handle_mint,
    "decode": _handle_decode,
    "format": _handle_format,
    "describe": _handle_describe,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv(Path.cwd() / ".env")
    parser = build_parser()
    options = parser.parse_args(argv)
    configure_logging(get_settings())
    try:
        HANDLERS[options.command](options)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))
    except IdGenError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0
