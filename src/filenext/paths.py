"""Path helpers: slash normalization and dir/name joining."""

from __future__ import annotations

import os


def reslash(path: str) -> str:
    """Rebuild a forward-slash path with the platform's separator.

    ``'foo/bar/bat'`` becomes ``'foo\\bar\\bat'`` on Windows and is left
    alone on POSIX. Paths with fewer than two segments are returned as-is.

    Args:
        path: Path whose segments are separated by ``/``.

    Returns:
        str: Path joined with ``os.sep``.
    """
    parts = path.split("/")
    if len(parts) < 2:
        return path

    # A leading slash leaves an empty first segment.
    if parts[0] == "":
        parts[0] = os.sep
    return os.path.join(*parts)


def join(dir: str | None, name: str | None) -> str:
    """Join a directory and a name, tolerating either being absent.

    Args:
        dir: Parent directory, or ``None`` for a bare starting point.
        name: Entry name, or ``None`` when ``dir`` is the entry itself.

    Returns:
        str: The joined path.

    Raises:
        ValueError: If both ``dir`` and ``name`` are ``None``.
    """
    if dir is not None and name is not None:
        return os.path.join(dir, name)
    if dir is not None:
        return dir
    if name is not None:
        return name
    raise ValueError("join() needs a directory or a name")
