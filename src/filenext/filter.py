"""Ready-made filters: fnmatch-based include/exclude by entry name."""

from __future__ import annotations

import os
from fnmatch import fnmatch

from filenext.expander import FilterContext


class PatternFilter:
    """Filter entries by fnmatch patterns on their bare name.

    Usable as either ``descend_filter`` or ``file_filter``. By default
    matching entries are rejected; with ``include=True`` only matching
    entries are accepted.
    """

    def __init__(self, patterns: list[str] | None = None, *, include: bool = False) -> None:
        """Initialize pattern filter.

        Args:
            patterns: Optional fnmatch pattern list.
            include: Accept only matches instead of rejecting them.
        """
        self._patterns: list[str] = list(patterns) if patterns else []
        self._include = include

    def matches(self, name: str) -> bool:
        """Return whether any configured pattern matches ``name``."""
        return any(fnmatch(name, pat) for pat in self._patterns)

    def should_exclude(self, name: str) -> bool:
        """Return whether an entry with this name should be left out.

        Args:
            name: Entry name.

        Returns:
            bool: ``True`` when the entry is filtered out.
        """
        if self._include:
            return not self.matches(name)
        return self.matches(name)

    def __call__(self, context: FilterContext) -> bool:
        name = context.name
        if name is None:
            name = os.path.basename(context.full_path)
        else:
            # A starting file carries its whole path as name.
            name = os.path.basename(name) or name
        return not self.should_exclude(name)
