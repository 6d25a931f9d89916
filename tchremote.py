#!/usr/bin/env python3
"""
Tchaik Remote CLI
Command-line remote control for players behind the Tchaik REST API.
Uses tchremote_lib.py for core functionality.
"""

import argparse
import math
import os
import sys

from tchremote_lib import (
    HOST_ENV,
    PLAYER_KEY_ENV,
    ConfigurationError,
    TchaikClient,
    TchaikError,
    ValueParseError,
    parse_action_value,
    parse_boolean,
    split_player_keys,
)


def flag_value(raw: str) -> bool:
    """Value of a boolean flag given as -flag=value."""
    try:
        return parse_boolean("flag", raw)
    except ValueParseError:
        raise argparse.ArgumentTypeError(f"invalid boolean value \"{raw}\"")


def positive_seconds(raw: str) -> float:
    try:
        seconds = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timeout \"{raw}\"")
    if not math.isfinite(seconds) or seconds <= 0:
        raise argparse.ArgumentTypeError(f"timeout must be a positive number of seconds, got \"{raw}\"")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tchremote",
        description="Remote control for players on a Tchaik REST API",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-addr", "--addr",
        metavar="ADDRESS",
        default="",
        help=f"schema://host(:port) address of the REST API (or set {HOST_ENV})"
    )
    parser.add_argument(
        "-key", "--key",
        default="",
        help=f"key which identifies the player to send actions to (or set {PLAYER_KEY_ENV})"
    )
    parser.add_argument(
        "-keys", "--keys",
        nargs="?",
        const=True,
        default=False,
        type=flag_value,
        metavar="BOOL",
        help="list all the keys on the host"
    )
    parser.add_argument(
        "-action", "--action",
        default="",
        help="action to send to the player (requires -key, some require -value)"
    )
    parser.add_argument(
        "-value", "--value",
        default="",
        help="value to send to the player"
    )
    parser.add_argument(
        "-create", "--create",
        metavar="LIST",
        default="",
        help="create a multi-player from a comma-separated list for the given -key"
    )
    parser.add_argument(
        "-delete", "--delete",
        nargs="?",
        const=True,
        default=False,
        type=flag_value,
        metavar="BOOL",
        help="delete the player for -key"
    )
    parser.add_argument(
        "-timeout", "--timeout",
        type=positive_seconds,
        metavar="SECONDS",
        default=None,
        help="HTTP timeout in seconds (default: none)"
    )
    parser.add_argument(
        "-verbose", "--verbose",
        nargs="?",
        const=True,
        default=False,
        type=flag_value,
        metavar="BOOL",
        help="print request and response details to stderr"
    )
    return parser


def resolve_host(addr: str) -> str:
    """Address from -addr, falling back to the environment."""
    host = addr or os.environ.get(HOST_ENV, "")
    if not host:
        raise ConfigurationError(f"must use -addr or set {HOST_ENV}")
    return host


def resolve_key(key: str) -> str:
    """Player key from -key, falling back to the environment."""
    key = key or os.environ.get(PLAYER_KEY_ENV, "")
    if not key:
        raise ConfigurationError(f"must use -key or set {PLAYER_KEY_ENV}")
    return key


def handle_params(args: argparse.Namespace, client: TchaikClient) -> None:
    """Run the one operation selected by the arguments."""
    if args.keys:
        print(client.get_player_keys().to_json())
        return

    key = resolve_key(args.key)

    if args.create:
        try:
            client.create_player(key, split_player_keys(args.create))
        except TchaikError as e:
            raise TchaikError(f"error creating player key: {e}") from e
    elif args.action:
        try:
            value = parse_action_value(args.action, args.value)
            client.send_action(key, args.action, value)
        except TchaikError as e:
            raise TchaikError(f"error handling action: {e}") from e
    elif args.delete:
        try:
            client.delete_player(key)
        except TchaikError as e:
            raise TchaikError(f"error deleting key: {e}") from e
    else:
        try:
            player = client.get_player(key)
        except TchaikError as e:
            raise TchaikError(f"error fetching key: {e}") from e
        print(player.to_json())


def main(argv=None) -> int:
    """Main function. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        host = resolve_host(args.addr)
        client = TchaikClient(host, timeout=args.timeout, verbose=args.verbose)
        handle_params(args, client)
    except TchaikError as e:
        print(e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
