"""Archive bridge: probe, extract to a temp dir, and map paths back.

Archives found during traversal are unpacked into a fresh temporary
directory and walked as if they were directories. Every entry produced
from inside an extraction carries an :class:`OriginContext` so its
caller-visible ("logical") path can be rebuilt as though the archive
itself were a directory, e.g. ``src/ddd.tar.gz/ccc/bbb.tar.gz/aaa``.
"""

from __future__ import annotations

import bz2
import gzip
import logging
import lzma
import os
import shutil
import tarfile
import tempfile
import warnings
import zipfile
import zlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from filenext.expander import QueueEntry, expand
from filenext.paths import join

if TYPE_CHECKING:
    from filenext.options import TraversalOptions

logger = logging.getLogger(__name__)

TEMP_PREFIX: Final[str] = "filenext-"

# Longest suffixes first so ".tar.gz" wins over ".gz".
_SUFFIXES: Final[tuple[tuple[str, str], ...]] = (
    (".tar.gz", "tar"),
    (".tar.bz2", "tar"),
    (".tar.xz", "tar"),
    (".tgz", "tar"),
    (".tbz2", "tar"),
    (".tbz", "tar"),
    (".txz", "tar"),
    (".tar", "tar"),
    (".zip", "zip"),
    (".jar", "zip"),
    (".gz", "gz"),
    (".bz2", "bz2"),
    (".xz", "xz"),
)

_STREAM_OPENERS: Final = {
    "gz": gzip.open,
    "bz2": bz2.open,
    "xz": lzma.open,
}

_PROBE_ERRORS: Final = (
    OSError,
    EOFError,
    ValueError,
    tarfile.TarError,
    zipfile.BadZipFile,
    lzma.LZMAError,
    zlib.error,
)

_EXTRACT_ERRORS: Final = _PROBE_ERRORS + (RuntimeError, NotImplementedError)


@dataclass(frozen=True, slots=True)
class ArchiveHandle:
    """A file confirmed to be an extractable archive.

    Attributes:
        path: Real path of the archive file.
        format: One of ``tar``, ``zip``, ``gz``, ``bz2``, ``xz``.
        suffix: Matched suffix, as it appears in the file name.
    """

    path: str
    format: str
    suffix: str

    def extract_to(self, target_dir: str) -> None:
        """Unpack the archive into ``target_dir``.

        Raises:
            OSError, tarfile.TarError, zipfile.BadZipFile, ...: On any
                extraction failure; callers route these to the error handler.
        """
        if self.format == "tar":
            with tarfile.open(self.path) as tar:
                tar.extractall(target_dir, filter="data")
        elif self.format == "zip":
            with zipfile.ZipFile(self.path) as zf:
                zf.extractall(target_dir)
        else:
            # Single compressed stream: one member named after the archive.
            member = os.path.basename(self.path)[: -len(self.suffix)]
            with _STREAM_OPENERS[self.format](self.path, "rb") as src:
                with open(os.path.join(target_dir, member), "wb") as dst:
                    shutil.copyfileobj(src, dst)


def _match_suffix(full_path: str) -> tuple[str, str] | None:
    lowered = os.path.basename(full_path).lower()
    for suffix, fmt in _SUFFIXES:
        # A bare ".gz" has nothing left to name the extracted member.
        if lowered.endswith(suffix) and len(lowered) > len(suffix):
            return full_path[-len(suffix) :], fmt
    return None


def _confirm(full_path: str, fmt: str) -> bool:
    if fmt == "tar":
        return tarfile.is_tarfile(full_path)
    if fmt == "zip":
        return zipfile.is_zipfile(full_path)
    with _STREAM_OPENERS[fmt](full_path, "rb") as stream:
        stream.read(1)
    return True


def try_archive(full_path: str) -> ArchiveHandle | None:
    """Return a handle when ``full_path`` is a readable archive.

    Probing never fails loudly: unknown suffixes, unreadable files, corrupt
    headers and any warnings raised along the way all mean "not an archive".

    Args:
        full_path: Real path of the candidate file.

    Returns:
        ArchiveHandle | None: Handle for extraction, or ``None``.
    """
    matched = _match_suffix(full_path)
    if matched is None:
        return None
    suffix, fmt = matched

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            confirmed = _confirm(full_path, fmt)
        except _PROBE_ERRORS as exc:
            logger.debug("Not an archive: %s (%s)", full_path, exc)
            return None

    if not confirmed:
        logger.debug("Not an archive: %s", full_path)
        return None
    logger.debug("Archive detected: %s (%s)", full_path, fmt)
    return ArchiveHandle(path=full_path, format=fmt, suffix=suffix)


@dataclass(slots=True, eq=False)
class OriginContext:
    """Link between an extraction directory and the archive it came from.

    Attributes:
        temp_root: Real temporary directory the archive was unpacked into.
        logical_parent: Queue entry of the archive file itself. Its own
            ``origin`` chains outward through enclosing archives.
        cleanup: Temporary directory owning ``temp_root``.
    """

    temp_root: str
    logical_parent: QueueEntry
    cleanup: tempfile.TemporaryDirectory[str] = field(repr=False)
    _released: bool = field(default=False, repr=False)

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Remove the extraction directory. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        logger.debug("Removing extraction dir %s", self.temp_root)
        self.cleanup.cleanup()


def extract(
    handle: ArchiveHandle,
    entry: QueueEntry,
    options: TraversalOptions,
) -> tuple[OriginContext | None, list[QueueEntry]]:
    """Unpack an archive and list its top level as queue entries.

    Args:
        handle: Archive to unpack.
        entry: Queue entry of the archive file.
        options: Active traversal options.

    Returns:
        tuple: The new context and its children, or ``(None, [])`` when
        extraction failed and the error handler did not abort.
    """
    cleanup = tempfile.TemporaryDirectory(prefix=TEMP_PREFIX)
    temp_root = cleanup.name
    logger.debug("Extracting %s to %s", entry.full_path, temp_root)

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            handle.extract_to(temp_root)
    except _EXTRACT_ERRORS as exc:
        cleanup.cleanup()
        options.error_handler(f"{entry.full_path}: cannot extract archive: {exc}")
        return None, []

    origin = OriginContext(temp_root=temp_root, logical_parent=entry, cleanup=cleanup)
    try:
        children = expand(origin, temp_root, options)
    except BaseException:
        origin.release()
        raise
    return origin, children


def _replace_root(dir: str, root: str, replacement: str) -> str | None:
    if dir == root:
        return replacement
    if dir.startswith(root + os.sep):
        return replacement + dir[len(root) :]
    return None


def to_logical_path(
    dir: str | None,
    name: str | None,
    origin: OriginContext | None,
) -> str:
    """Rebuild the caller-visible path of an entry.

    Walks the origin chain outward, swapping each extraction root for the
    path of the archive it was unpacked from.

    Args:
        dir: Real parent directory (or the entry itself for ``dirs``).
        name: Entry name, or ``None``.
        origin: Context of the innermost archive, or ``None``.

    Returns:
        str: Logical path. On a root mismatch the real directory is kept
        and a warning is logged.
    """
    while origin is not None:
        parent = origin.logical_parent
        replaced = None
        if dir is not None:
            replaced = _replace_root(dir, origin.temp_root, parent.full_path)
        if replaced is None:
            logger.warning(
                "Path %s is not under extraction root %s", dir, origin.temp_root
            )
        else:
            dir = replaced
        origin = parent.origin
    return join(dir, name)
