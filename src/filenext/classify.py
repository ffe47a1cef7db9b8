"""Entry classification: file, directory, symlink, archive, other, missing."""

from __future__ import annotations

import enum
import os
import stat
from dataclasses import dataclass

from filenext.archive import ArchiveHandle, try_archive


class EntryKind(enum.Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    ARCHIVE = "archive"
    OTHER = "other"
    MISSING = "missing"


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of :func:`classify`.

    Attributes:
        kind: What the path turned out to be.
        archive: Extraction handle when ``kind`` is ``ARCHIVE``.
    """

    kind: EntryKind
    archive: ArchiveHandle | None = None


def is_symlink(path: str) -> bool:
    """Return whether ``path`` is a symlink. Always ``False`` without symlink support."""
    return os.path.islink(path)


def classify(
    full_path: str,
    *,
    probe_archives: bool = False,
    follow_symlinks: bool = True,
) -> Classification:
    """Work out what kind of entry ``full_path`` is.

    Symlinks are followed unless ``follow_symlinks`` is ``False``, in which
    case they are reported as ``SYMLINK``. Only regular files are probed for
    archive-ness, and only when asked.

    Args:
        full_path: Path to inspect.
        probe_archives: Whether to check regular files for archive formats.
        follow_symlinks: Whether to classify a symlink by its target.

    Returns:
        Classification: Kind, plus archive handle when applicable.
    """
    if not follow_symlinks and is_symlink(full_path):
        return Classification(EntryKind.SYMLINK)

    try:
        mode = os.stat(full_path).st_mode
    except OSError:
        return Classification(EntryKind.MISSING)

    if stat.S_ISDIR(mode):
        return Classification(EntryKind.DIRECTORY)
    if not stat.S_ISREG(mode):
        return Classification(EntryKind.OTHER)

    if probe_archives:
        handle = try_archive(full_path)
        if handle is not None:
            return Classification(EntryKind.ARCHIVE, handle)
    return Classification(EntryKind.FILE)
