"""Lazy depth-first traversal: the ``files``, ``dirs`` and ``everything`` iterators."""

from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Literal, NamedTuple

from filenext.archive import ArchiveHandle, OriginContext, extract, to_logical_path
from filenext.classify import EntryKind, classify
from filenext.expander import FilterContext, QueueEntry, expand
from filenext.options import TraversalOptions, build_options
from filenext.paths import reslash

logger = logging.getLogger(__name__)

Mode = Literal["files", "dirs", "everything"]

_EXPANDABLE = (EntryKind.DIRECTORY, EntryKind.ARCHIVE)


class Found(NamedTuple):
    """One yielded entry in multi-value form.

    ``full_path`` is the real on-disk path (possibly inside an extraction
    temp dir); ``logical_path`` shows archive contents nested under the
    archive's own path.
    """

    dir: str | None
    name: str | None
    full_path: str
    logical_path: str


@dataclass(frozen=True, slots=True)
class _Release:
    """Queue marker placed after an archive's children."""

    origin: OriginContext


class Traversal:
    """Pull-based cursor over a directory tree.

    Each advance does just enough work to produce one value or exhaust the
    queue. Newly found children go to the front of the queue, so a
    directory is fully explored before its siblings.

    Iterating yields full paths. Use :meth:`next_entry` or :meth:`entries`
    for :class:`Found` tuples. Extraction directories are removed as soon
    as the archive's subtree is exhausted, so real paths inside an archive
    are only valid until the next advance after its last entry. Call
    :meth:`close` (or use the traversal as a context manager) to release
    outstanding extractions when stopping early.
    """

    def __init__(
        self,
        mode: Mode,
        options: TraversalOptions,
        queue: Iterable[QueueEntry] = (),
    ) -> None:
        self._mode = mode
        self._options = options
        self._queue: deque[QueueEntry | _Release] = deque(queue)
        self._live: list[OriginContext] = []

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def options(self) -> TraversalOptions:
        return self._options

    def __iter__(self) -> Traversal:
        return self

    def __next__(self) -> str:
        found = self.next_entry()
        if found is None:
            raise StopIteration
        return found.full_path

    def __enter__(self) -> Traversal:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def entries(self) -> Iterator[Found]:
        """Yield the remaining entries as :class:`Found` tuples."""
        while True:
            found = self.next_entry()
            if found is None:
                return
            yield found

    def next_entry(self) -> Found | None:
        """Advance to the next matching entry.

        Returns:
            Found | None: The entry, or ``None`` once the queue is empty.
        """
        while self._queue:
            item = self._queue.popleft()
            if isinstance(item, _Release):
                self._release(item.origin)
                continue

            found = self._step(item)
            if found is not None:
                return found
        return None

    def close(self) -> None:
        """Drop the queue and remove every outstanding extraction dir."""
        self._queue.clear()
        while self._live:
            self._live.pop().release()

    def _step(self, entry: QueueEntry) -> Found | None:
        classified = classify(
            entry.full_path, probe_archives=self._options.expand_archives
        )
        kind = classified.kind

        if classified.archive is not None:
            self._descend_archive(entry, classified.archive)
        elif kind is EntryKind.DIRECTORY:
            self._push(expand(entry.origin, entry.full_path, self._options))

        if self._mode == "files":
            if kind is EntryKind.FILE and self._accept(entry):
                return _found(entry)
            return None

        if self._mode == "dirs":
            if kind in _EXPANDABLE:
                logical = to_logical_path(entry.full_path, None, entry.origin)
                return Found(None, None, entry.full_path, logical)
            return None

        if self._accept(entry):
            return _found(entry)
        return None

    def _accept(self, entry: QueueEntry) -> bool:
        file_filter = self._options.file_filter
        if file_filter is None:
            return True
        context = FilterContext(name=entry.name, dir=entry.dir, full_path=entry.full_path)
        return bool(file_filter(context))

    def _descend_archive(self, entry: QueueEntry, handle: ArchiveHandle) -> None:
        origin, children = extract(handle, entry, self._options)
        if origin is None:
            return
        self._live.append(origin)
        self._queue.appendleft(_Release(origin))
        self._push(children)

    def _push(self, children: list[QueueEntry]) -> None:
        self._queue.extendleft(reversed(children))

    def _release(self, origin: OriginContext) -> None:
        origin.release()
        self._live.remove(origin)


def _found(entry: QueueEntry) -> Found:
    logical = to_logical_path(entry.dir, entry.name, entry.origin)
    return Found(entry.dir, entry.name, entry.full_path, logical)


def _setup(
    mode: Mode,
    starting_points: tuple[str | os.PathLike[str], ...],
    raw_options: dict[str, Any],
) -> Traversal:
    options = build_options(mode, raw_options)

    queue: list[QueueEntry] = []
    for raw in starting_points:
        start = reslash(os.fspath(raw))
        if os.path.isdir(start):
            queue.append(QueueEntry(start, None, start))
        else:
            queue.append(QueueEntry(None, start, start))

    logger.debug("Starting %s() over %d path(s)", mode, len(queue))
    return Traversal(mode, options, queue)


def files(*starting_points: str | os.PathLike[str], **options: Any) -> Traversal:
    """Iterate over regular files under ``starting_points``.

    Directories and archives are descended into but not returned.

    Args:
        *starting_points: Files or directories to start from.
        **options: Any :class:`~filenext.options.TraversalOptions` field.

    Returns:
        Traversal: Iterator yielding full paths.
    """
    return _setup("files", starting_points, options)


def dirs(*starting_points: str | os.PathLike[str], **options: Any) -> Traversal:
    """Iterate over directories (and archives) under ``starting_points``.

    ``file_filter`` has no effect here.
    """
    return _setup("dirs", starting_points, options)


def everything(*starting_points: str | os.PathLike[str], **options: Any) -> Traversal:
    """Iterate over every entry under ``starting_points``, whatever its type.

    ``file_filter`` is consulted for directories and archives too.
    """
    return _setup("everything", starting_points, options)
