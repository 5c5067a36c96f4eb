"""Version information for the command-line tool."""

from __future__ import annotations

import platform

__all__ = [
    "VERSION_CORE",
    "VERSION_PRE_RELEASE",
    "version",
    "display_version",
    "truncate",
]

# Core portion of the version per Semantic Versioning 2.0.0.
VERSION_CORE = "0.23.0"

# Base pre-release portion of the version per Semantic Versioning 2.0.0.
VERSION_PRE_RELEASE = "alpha"

# Number of commits since the last release; set at build time when known.
git_commit_count = ""

# Commit the tool was built from; set at build time when known.
git_commit = ""


def truncate(s: str, max_len: int) -> str:
    """Return at most the first ``max_len`` characters of ``s``."""
    if len(s) < max_len:
        return s
    return s[:max_len]


def version() -> str:
    """Return the semantic version of the tool."""
    result = VERSION_CORE
    if VERSION_PRE_RELEASE:
        result += "-" + VERSION_PRE_RELEASE
        if git_commit_count:
            result += "." + git_commit_count
        # Build metadata is only added to pre-release versions.
        if git_commit:
            result += "+" + truncate(git_commit, 14)
    return result


def _platform_name() -> str:
    system = platform.system().lower() or "unknown"
    machine = platform.machine().lower() or "unknown"
    return f"{system}/{machine}"


def display_version() -> str:
    """Return the version formatted for display, with runtime details."""
    return f"kind v{version()} python{platform.python_version()} {_platform_name()}"