"""Conveniences for running commands and gathering their output."""

from __future__ import annotations

import io
import os
import sys
from collections.abc import Callable
from typing import IO, Any

from kindcli.command import LocalCmd, RunError
from kindcli.concurrent import aggregate_concurrent

__all__ = [
    "run_error_for_error",
    "combined_output_lines",
    "output_lines",
    "output",
    "inherit_output",
    "run_with_stdout_reader",
    "run_with_stdin_writer",
]


def run_error_for_error(err: BaseException | None) -> RunError | None:
    """Return the deepest :class:`RunError` in ``err``'s cause chain, if any."""
    found: RunError | None = None
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        if isinstance(err, RunError):
            found = err
        cause = getattr(err, "cause", None)
        if not isinstance(cause, BaseException):
            cause = err.__cause__
        err = cause
    return found


def _scan_lines(data: bytes) -> list[str]:
    text = data.decode(errors="replace")
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def combined_output_lines(cmd: LocalCmd) -> list[str]:
    """Run ``cmd`` and return its stdout and stderr, interleaved, as lines."""
    buffer = io.BytesIO()
    cmd.set_stdout(buffer)
    cmd.set_stderr(buffer)
    cmd.run()
    return _scan_lines(buffer.getvalue())


def output_lines(cmd: LocalCmd) -> list[str]:
    """Run ``cmd`` and return its stdout as lines."""
    return _scan_lines(output(cmd))


def output(cmd: LocalCmd) -> bytes:
    """Run ``cmd`` and return its stdout."""
    buffer = io.BytesIO()
    cmd.set_stdout(buffer)
    cmd.run()
    return buffer.getvalue()


def inherit_output(cmd: LocalCmd) -> LocalCmd:
    """Send ``cmd``'s output to this process's stdout and stderr."""
    cmd.set_stderr(sys.stderr)
    cmd.set_stdout(sys.stdout)
    return cmd


def run_with_stdout_reader(
    cmd: LocalCmd, reader_func: Callable[[IO[bytes]], Any]
) -> None:
    """Run ``cmd`` with its stdout piped to ``reader_func``, concurrently."""
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "rb")
    writer = os.fdopen(write_fd, "wb")
    cmd.set_stdout(writer)

    def read() -> None:
        with reader:
            reader_func(reader)

    def run() -> None:
        with writer:
            cmd.run()

    aggregate_concurrent([read, run])


def run_with_stdin_writer(
    cmd: LocalCmd, writer_func: Callable[[IO[bytes]], Any]
) -> None:
    """Run ``cmd`` with ``writer_func``'s output piped to its stdin."""
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "rb")
    writer = os.fdopen(write_fd, "wb")
    cmd.set_stdin(reader)

    def write() -> None:
        with writer:
            writer_func(writer)

    def run() -> None:
        with reader:
            cmd.run()

    aggregate_concurrent([write, run])