"""Filters driven by a `.gitignore` file, matched with pathspec."""

from __future__ import annotations

import logging
import os

from pathspec import GitIgnoreSpec

from filenext.expander import FilterContext

logger = logging.getLogger(__name__)


def load_gitignore_spec(root: str | os.PathLike[str]) -> GitIgnoreSpec | None:
    """Compile ``root/.gitignore``, or return ``None`` if it cannot be read."""
    path = os.path.join(os.fspath(root), ".gitignore")
    try:
        with open(path, encoding="utf-8") as fh:
            return GitIgnoreSpec.from_lines(fh)
    except OSError as exc:
        logger.debug("No usable .gitignore at %s: %s", path, exc)
        return None


class GitignoreFilter:
    """Reject entries matched by a ``.gitignore`` under ``root``.

    Paths are matched relative to ``root``. Anything outside ``root``,
    including entries inside archive extraction dirs, is accepted.
    """

    def __init__(
        self,
        root: str | os.PathLike[str],
        spec: GitIgnoreSpec | None = None,
    ) -> None:
        self._root = os.path.abspath(os.fspath(root))
        self._spec = spec if spec is not None else load_gitignore_spec(self._root)

    @property
    def spec(self) -> GitIgnoreSpec | None:
        return self._spec

    def _relative(self, full_path: str) -> str | None:
        try:
            rel = os.path.relpath(full_path, self._root)
        except ValueError:
            # Different drive on Windows.
            return None
        if rel == os.curdir or rel == os.pardir or rel.startswith(os.pardir + os.sep):
            return None
        return rel.replace(os.sep, "/")

    def __call__(self, context: FilterContext) -> bool:
        if self._spec is None:
            return True
        full_path = os.path.abspath(context.full_path)
        rel = self._relative(full_path)
        if rel is None:
            return True
        if os.path.isdir(full_path):
            rel += "/"
        return not self._spec.match_file(rel)
