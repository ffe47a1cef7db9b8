"""Traversal options, defaults and sort helpers."""

from __future__ import annotations

import functools
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, NoReturn

from filenext import FileNextError

if TYPE_CHECKING:
    from filenext.expander import QueueEntry


EntryFilter = Callable[[Any], object]
ErrorHandler = Callable[[str], object]
Comparator = Callable[[Any, Any], int]


def die(message: str) -> NoReturn:
    """Default error handler: abort the traversal.

    Raises:
        FileNextError: Always, carrying ``message``.
    """
    raise FileNextError(message)


def sort_standard(a: QueueEntry, b: QueueEntry) -> int:
    """Compare two entries by full path, ascending."""
    return (a.full_path > b.full_path) - (a.full_path < b.full_path)


def sort_reverse(a: QueueEntry, b: QueueEntry) -> int:
    """Same as :func:`sort_standard`, but descending."""
    return sort_standard(b, a)


@dataclass(frozen=True, slots=True)
class TraversalOptions:
    """Options controlling a traversal.

    Attributes:
        file_filter: Called with a ``FilterContext`` for every candidate
            about to be returned. Falsy result skips it. Ignored by ``dirs``.
        descend_filter: Called with a ``FilterContext`` for every directory
            found while expanding. Falsy result prunes it. Never applied to
            starting points.
        error_handler: Called with a message on every I/O error. The
            default raises :class:`~filenext.FileNextError`.
        sort_files: ``True`` for :func:`sort_standard`, or a three-way
            comparator over entries with ``dir``, ``name`` and ``full_path``.
            Falsy keeps directory-read order.
        follow_symlinks: When ``False``, symlinks found while expanding are
            skipped. Starting points are never skipped.
        expand_archives: When ``False``, archives are plain files and are
            never probed or unpacked.
    """

    file_filter: EntryFilter | None = None
    descend_filter: EntryFilter | None = None
    error_handler: ErrorHandler = die
    sort_files: bool | Comparator | None = None
    follow_symlinks: bool = True
    expand_archives: bool = True

    @property
    def comparator(self) -> Comparator | None:
        if not self.sort_files:
            return None
        if callable(self.sort_files):
            return self.sort_files
        return sort_standard

    @property
    def sort_key(self) -> Callable[[Any], Any] | None:
        comparator = self.comparator
        if comparator is None:
            return None
        return functools.cmp_to_key(comparator)


OPTION_NAMES = frozenset(f.name for f in fields(TraversalOptions))


def build_options(factory: str, raw: Mapping[str, Any]) -> TraversalOptions:
    """Fold caller keyword options into a :class:`TraversalOptions`.

    ``None`` values fall back to the defaults. Unknown keys go to the error
    handler; when it returns instead of raising, the key is ignored.

    Args:
        factory: Name of the factory being set up, used in messages.
        raw: Options as passed by the caller.

    Returns:
        TraversalOptions: Resolved options.
    """
    known = {
        key: value
        for key, value in raw.items()
        if key in OPTION_NAMES and value is not None
    }
    options = TraversalOptions(**known)

    for key in raw:
        if key not in OPTION_NAMES:
            options.error_handler(f"Invalid option passed to {factory}(): {key}")
    return options
