"""Named pattern sets for things a tree walk usually wants to skip."""

from __future__ import annotations

from typing import Final

from filenext.filter import PatternFilter

PRESETS: Final[dict[str, tuple[str, ...]]] = {
    # Version-control metadata directories.
    "vcs": (".git", ".svn", "CVS", ".hg", ".bzr", "_darcs", "RCS", "SCCS", "_MTN"),
    # Editor swap and backup files.
    "backup": ("*~", "#*#", "*.bak", "*.swp", "*.swo"),
    # Operating system litter.
    "generic": (".DS_Store", "Thumbs.db"),
}

BASE_PRESET: Final[str] = "generic"


def get_preset_patterns(name: str) -> list[str]:
    """Patterns for preset ``name``, preceded by the ``generic`` ones.

    Raises:
        ValueError: ``name`` is not in :data:`PRESETS`.
    """
    try:
        own = PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown preset {name!r}; known presets are {', '.join(sorted(PRESETS))}"
        ) from None
    if name == BASE_PRESET:
        return list(own)
    return [*PRESETS[BASE_PRESET], *own]


def preset_filter(*names: str) -> PatternFilter:
    """Build an exclusion filter from one or more presets.

    ``preset_filter("vcs")`` makes a ``descend_filter`` that skips
    version-control directories; ``preset_filter("backup")`` works as a
    ``file_filter``.

    Raises:
        ValueError: If any name is not a known preset.
    """
    patterns = [p for name in names for p in get_preset_patterns(name)]
    return PatternFilter(list(dict.fromkeys(patterns)))
