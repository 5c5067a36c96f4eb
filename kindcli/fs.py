"""Host filesystem helpers that behave well with container bind mounts."""

from __future__ import annotations

import os
import posixpath
import shutil
import stat
import sys
import tempfile

__all__ = ["temp_dir", "is_abs", "copy", "copy_file"]


def temp_dir(dir: str | None = None, prefix: str | None = None) -> str:
    """Create a temporary directory, returning a path that can be mounted.

    On macOS the default temporary location under ``/var/`` is not mountable,
    so the ``/private/var/...`` equivalent is returned instead.
    """
    name = tempfile.mkdtemp(prefix=prefix or None, dir=dir or None)
    if sys.platform == "darwin" and name.startswith("/var/"):
        name = os.path.join("/private", name.lstrip("/"))
    return name


def is_abs(host_path: str) -> bool:
    """Tell whether a path is absolute by POSIX or by host rules."""
    return posixpath.isabs(host_path) or os.path.isabs(host_path)


def copy(src: str, dst: str) -> None:
    """Copy a file, directory tree or symlink target from ``src`` to ``dst``.

    Parent directories are created and file modes kept; symlinks are
    dereferenced like ``cp -r``.
    """
    info = os.lstat(src)
    parent = os.path.dirname(dst)
    if parent:
        os.makedirs(parent, exist_ok=True)
    _copy_with_info(src, dst, info)


def copy_file(src: str, dst: str) -> None:
    """Copy a single file, keeping its mode."""
    _copy_file(src, dst, os.stat(src))


def _copy_with_info(src: str, dst: str, info: os.stat_result) -> None:
    if stat.S_ISLNK(info.st_mode):
        _copy_symlink(src, dst)
    elif stat.S_ISDIR(info.st_mode):
        _copy_dir(src, dst, info)
    else:
        _copy_file(src, dst, info)


def _copy_file(src: str, dst: str, info: os.stat_result) -> None:
    with open(src, "rb") as source:
        fd = os.open(dst, os.O_RDWR | os.O_CREAT | os.O_TRUNC, stat.S_IMODE(info.st_mode))
        with os.fdopen(fd, "wb") as target:
            shutil.copyfileobj(source, target)
            target.flush()
            os.fsync(target.fileno())


def _copy_symlink(src: str, dst: str) -> None:
    real_src = os.path.realpath(src, strict=True)
    _copy_with_info(real_src, dst, os.lstat(real_src))


def _copy_dir(src: str, dst: str, info: os.stat_result) -> None:
    os.makedirs(dst, mode=stat.S_IMODE(info.st_mode), exist_ok=True)
    with os.scandir(src) as scan:
        entries = sorted(scan, key=lambda entry: entry.name)
    for entry in entries:
        _copy_with_info(
            entry.path,
            os.path.join(dst, entry.name),
            entry.stat(follow_symlinks=False),
        )