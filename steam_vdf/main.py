#!/usr/bin/env python3
"""steam-vdf - Entry point."""

import argparse
import logging
import sys
from pathlib import Path

from .errors import MalformedDocument
from .nodes import ObjectNode, StringNode
from .parser import parse
from .serializer import serialize
from .steam import (
    find_steam_root,
    get_all_installed_games,
    load_vdf,
    steamid3_to_steamid64,
)
from .tui import run_tui


def _read_document(path: str) -> ObjectNode:
    if path == "-":
        return parse(sys.stdin.read().removeprefix("\ufeff").split("\n"))
    return load_vdf(Path(path))


def _format_file(path: str) -> int:
    try:
        data = _read_document(path)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MalformedDocument as e:
        print(f"Error: {path}: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(serialize(data))
    return 0


def _get_value(path: str, key_path: str) -> int:
    try:
        data = _read_document(path)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MalformedDocument as e:
        print(f"Error: {path}: {e}", file=sys.stderr)
        return 1

    keys = [k for k in key_path.split("/") if k]
    node = data.find(*keys)
    if node is None:
        print(f"Error: {key_path} not found in {path}", file=sys.stderr)
        return 1

    if isinstance(node, StringNode):
        print(node.value)
    else:
        sys.stdout.write(serialize(node))
    return 0


def _list_games(steam_root: Path) -> int:
    games = get_all_installed_games(steam_root)
    if not games:
        print("No installed games found.")
        return 0

    print(f"Found {len(games)} installed games:\n")

    # Calculate column widths
    name_width = max(len(g.name) for g in games)
    name_width = min(name_width, 50)  # Cap at 50 chars

    for game in games:
        name = game.name[:50]
        print(f"  {name:<{name_width}}  {game.format_size():>10}  {game.library_path}")

    print(f"\nTotal: {len(games)} games")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Read, rewrite and browse Steam VDF files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  steam-vdf                                  Browse installed games in the TUI
  steam-vdf --list                           List all installed games and exit
  steam-vdf --format appmanifest_440.acf     Print the file re-serialized
  steam-vdf --get appmanifest_440.acf AppState/name
  steam-vdf --steamid "[U:1:22202]"          Print the SteamID64
        """,
    )

    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--format",
        metavar="FILE",
        help="Parse FILE ('-' for stdin) and print it re-serialized",
    )
    action.add_argument(
        "--get",
        nargs=2,
        metavar=("FILE", "KEY_PATH"),
        help="Print the value or section at a slash-separated key path",
    )
    action.add_argument(
        "--list",
        action="store_true",
        dest="list_games",
        help="List all installed games and exit",
    )
    action.add_argument(
        "--steamid",
        metavar="ID3",
        help="Convert a SteamID3 such as [U:1:22202] to SteamID64",
    )

    parser.add_argument(
        "--steam-root",
        type=Path,
        help="Steam installation directory (detected if omitted)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.format:
        return _format_file(args.format)

    if args.get:
        return _get_value(*args.get)

    if args.steamid:
        try:
            print(steamid3_to_steamid64(args.steamid))
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    # Check Steam installation
    steam_root = find_steam_root(args.steam_root)
    if steam_root is None:
        print("Error: Could not find Steam installation.", file=sys.stderr)
        print("Use --steam-root to point at it.", file=sys.stderr)
        return 1

    # List mode
    if args.list_games:
        return _list_games(steam_root)

    # Run TUI
    try:
        run_tui(steam_root)
        return 0
    except KeyboardInterrupt:
        print("\nAborted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
