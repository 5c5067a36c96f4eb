"""Helpers for loading container images from the host into cluster nodes."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from kindcli.cmdhelpers import output_lines
from kindcli.command import command

__all__ = [
    "remove_duplicates",
    "sanitize_image",
    "check_if_image_retag_required",
    "image_id",
    "save",
]

_DEFAULT_DOMAIN = "docker.io/"
_OFFICIAL_REPO_NAME = "library"

TagFetcher = Callable[[Any, str], Mapping[str, bool]]


def remove_duplicates(items: Iterable[str]) -> list[str]:
    """Drop repeated entries, keeping the first occurrence of each."""
    return list(dict.fromkeys(items))


def sanitize_image(image: str) -> str:
    """Return the fully qualified form of an image reference.

    Adds the default registry, the official repository and the ``latest``
    tag where the reference leaves them out.
    """
    name = image
    if "/" not in image:
        name = f"{_OFFICIAL_REPO_NAME}/{image}"

    first, sep, _ = name.partition("/")
    if not sep or (not any(c in first for c in ".:") and first != "localhost"):
        name = _DEFAULT_DOMAIN + name

    if ":" not in name:
        name += ":latest"
    return name


def check_if_image_retag_required(
    node: Any, image_id: str, image_name: str, tag_fetcher: TagFetcher
) -> tuple[bool, bool, str]:
    """Look up an image's tags on a node by its ID.

    Returns ``(exists, retag_required, sanitized_name)``: whether the node
    has an image with that ID, whether it lacks the requested tag, and the
    fully qualified requested name. A failed lookup counts as absent.
    """
    try:
        tags = tag_fetcher(node, image_id)
    except Exception:
        return False, False, ""
    if not tags:
        return False, False, ""
    sanitized = sanitize_image(image_name)
    return True, not tags.get(sanitized, False), sanitized


def image_id(name: str) -> str:
    """Return the ID of a local image, as reported by ``docker image inspect``."""
    cmd = command("docker", "image", "inspect", "-f", "{{ .Id }}", name)
    lines = output_lines(cmd)
    if len(lines) != 1:
        raise RuntimeError(
            f"Docker image ID should only be one line, got {len(lines)} lines"
        )
    return lines[0]


def save(images: Iterable[str], dest: str) -> None:
    """Save images to the archive ``dest``, as ``docker save`` does."""
    command("docker", "save", "-o", dest, *images).run()