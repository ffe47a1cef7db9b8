"""Directory expansion: list children, apply policy, optionally sort."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from filenext.archive import OriginContext
    from filenext.options import TraversalOptions

logger = logging.getLogger(__name__)

_SKIP_NAMES: Final[frozenset[str]] = frozenset({os.curdir, os.pardir})


@dataclass(frozen=True, slots=True)
class QueueEntry:
    """One pending item in the traversal queue.

    Attributes:
        dir: Parent directory, or ``None`` for a bare starting file.
        name: Name within ``dir``, or ``None`` for a starting directory.
        full_path: Where the entry can be found on disk right now. Inside
            an archive this is under the extraction temp dir.
        origin: Context of the archive this entry was extracted from.
    """

    dir: str | None
    name: str | None
    full_path: str
    origin: OriginContext | None = None


@dataclass(frozen=True, slots=True)
class FilterContext:
    """What a file or descend filter gets to look at.

    Attributes:
        name: Bare name of the entry (the whole path for a starting file).
        dir: Directory holding the entry, ``None`` for a starting file.
        full_path: Complete real path of the entry.
    """

    name: str | None
    dir: str | None
    full_path: str


def _report(
    options: TraversalOptions,
    origin: OriginContext | None,
    dir_path: str,
    exc: OSError,
) -> None:
    reason = exc.strerror or exc
    if origin is None:
        options.error_handler(f"{dir_path}: {reason}")
        return

    # Imported here: archive depends on this module.
    from filenext.archive import to_logical_path

    logical = to_logical_path(dir_path, None, origin)
    options.error_handler(f"{logical}: {reason} (extracted to {dir_path})")


def _admit(
    origin: OriginContext | None,
    dir_path: str,
    dir_entry: os.DirEntry[str],
    options: TraversalOptions,
) -> QueueEntry | None:
    name = dir_entry.name
    if name in _SKIP_NAMES:
        return None

    full_path = os.path.join(dir_path, name)
    try:
        skip_link = not options.follow_symlinks and dir_entry.is_symlink()
        check_descend = options.descend_filter is not None and dir_entry.is_dir()
    except OSError:
        logger.debug("Cannot stat: %s", full_path)
        return None

    if skip_link:
        logger.debug("Skipping symlink: %s", full_path)
        return None

    if check_descend:
        context = FilterContext(name=name, dir=dir_path, full_path=full_path)
        if not options.descend_filter(context):
            logger.debug("Not descending into %s", full_path)
            return None

    return QueueEntry(dir_path, name, full_path, origin)


def expand(
    origin: OriginContext | None,
    dir_path: str,
    options: TraversalOptions,
) -> list[QueueEntry]:
    """List the children of ``dir_path`` worth queueing.

    Symlinks are dropped when ``follow_symlinks`` is off, directories
    rejected by ``descend_filter`` are dropped, and the survivors are
    sorted when ``sort_files`` is set. Unreadable directories are reported
    through the error handler and contribute nothing. Exceptions raised
    by ``descend_filter`` propagate untouched.

    Args:
        origin: Archive context to stamp on each child, if any.
        dir_path: Real directory to list.
        options: Active traversal options.

    Returns:
        list[QueueEntry]: Children in queue order.
    """
    try:
        scanner = os.scandir(dir_path)
    except OSError as exc:
        _report(options, origin, dir_path, exc)
        return []

    children: list[QueueEntry] = []
    with scanner:
        while True:
            try:
                dir_entry = next(scanner)
            except StopIteration:
                break
            except OSError as exc:
                _report(options, origin, dir_path, exc)
                break

            child = _admit(origin, dir_path, dir_entry, options)
            if child is not None:
                children.append(child)

    sort_key = options.sort_key
    if sort_key is not None:
        children.sort(key=sort_key)
    return children
