"""The ``kind`` command line."""

from __future__ import annotations

import argparse
import sys
from typing import IO

from kindcli.streams import IOStreams, standard_io_streams
from kindcli.version import display_version, version

__all__ = ["build_parser", "resolve_verbosity", "main"]

_SHORT = "kind is a tool for managing local Kubernetes clusters"
_LONG = "kind creates and manages local Kubernetes clusters using Docker container 'nodes'"
_DEPRECATION = "WARNING: --loglevel is deprecated, please switch to -v and -q!"
_COLOR_DEPRECATION = (
    "\x1b[93mWARNING\x1b[0m: --loglevel is deprecated, please switch to -v and -q!"
)
_MAX_VERBOSITY = 2147483647


def _add_global_flags(parser: argparse.ArgumentParser, *, suppress: bool) -> None:
    default = argparse.SUPPRESS if suppress else None
    parser.add_argument(
        "--loglevel", default=default, help="DEPRECATED: see -v instead"
    )
    parser.add_argument(
        "-v",
        "--verbosity",
        type=int,
        default=default,
        help="info log verbosity, higher value produces more output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress else False,
        help="silence all stderr output",
    )


def _run_version(streams: IOStreams, *, quiet: bool, verbosity: int) -> None:
    if not quiet and verbosity >= 0:
        print(display_version(), file=streams.stdout)
    else:
        print(version(), file=streams.stdout)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the root command and its subcommands."""
    parser = argparse.ArgumentParser(prog="kind", description=_LONG)
    parser.add_argument("--version", action="version", version=f"kind version {version()}")
    _add_global_flags(parser, suppress=False)

    # Global flags may also follow a subcommand without overriding earlier ones.
    global_flags = argparse.ArgumentParser(add_help=False)
    _add_global_flags(global_flags, suppress=True)

    subcommands = parser.add_subparsers(dest="command", metavar="COMMAND", title=_SHORT)
    version_parser = subcommands.add_parser(
        "version",
        parents=[global_flags],
        help="Prints the kind CLI version",
        description="Prints the kind CLI version",
    )
    version_parser.set_defaults(handler=_run_version)
    return parser


def resolve_verbosity(loglevel: str | None, verbosity: int | None) -> int:
    """Work out the verbosity from the flags that were given.

    An explicit verbosity wins; otherwise the deprecated log level maps
    ``debug`` and ``trace`` onto verbosities, and anything else onto 0.
    """
    if verbosity is not None:
        return verbosity
    if loglevel == "debug":
        return 3
    if loglevel == "trace":
        return _MAX_VERBOSITY
    return 0


def _color_enabled(stream: IO[str]) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def main(argv: list[str] | None = None) -> int:
    """Run the command line and return the exit status."""
    streams = standard_io_streams()
    parser = build_parser()
    args = parser.parse_args(argv)

    quiet = bool(args.quiet)
    verbosity = resolve_verbosity(args.loglevel, args.verbosity)
    if args.loglevel is not None and not quiet:
        warning = _COLOR_DEPRECATION if _color_enabled(streams.stderr) else _DEPRECATION
        print(warning, file=streams.stderr)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(streams.stdout)
        return 0
    try:
        handler(streams, quiet=quiet, verbosity=verbosity)
    except Exception as exc:
        if not quiet:
            print(f"ERROR: {exc}", file=streams.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())