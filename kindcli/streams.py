"""The standard trio of input, output and error streams."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import IO

__all__ = ["IOStreams", "standard_io_streams"]


@dataclass
class IOStreams:
    """Input, output and error streams, bundled for passing around and testing."""

    stdin: IO[str]
    stdout: IO[str]
    stderr: IO[str]


def standard_io_streams() -> IOStreams:
    """Return the process's current standard streams."""
    return IOStreams(stdin=sys.stdin, stdout=sys.stdout, stderr=sys.stderr)