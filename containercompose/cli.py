"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys

from containercompose.compose import ComposeError
from containercompose.containers import ContainerError
from containercompose.runner import run_services, stop_and_remove_services

VERSION = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="container-compose",
        description="Run compose files with the container tool.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-f", "--file", help="compose file to use")
    commands = parser.add_subparsers(dest="command")

    up = commands.add_parser("up", help="Create and run containers")
    up.add_argument("-d", "--detach", action="store_true")
    up.add_argument("service", nargs="*")

    commands.add_parser("down", help="Stop and remove containers")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "up":
            run_services(args.file)
        elif args.command == "down":
            stop_and_remove_services(args.file)
        else:
            parser.print_help()
    except (ComposeError, ContainerError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())