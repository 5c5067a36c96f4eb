"""Building blocks for a local Kubernetes cluster tool: commands, errors, filesystem, images and version."""

__version__ = "0.23.0"

__all__ = [
    "cli",
    "cmdhelpers",
    "command",
    "concurrent",
    "errors",
    "fs",
    "images",
    "streams",
    "version",
]