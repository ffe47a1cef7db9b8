"""Shared fixtures for filenext tests."""

from __future__ import annotations

import os
import tarfile
import zipfile
from pathlib import Path

import pytest

from filenext.archive import TEMP_PREFIX


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a standard test directory tree.

    Structure::

        root/
        ├── .svn/
        │   └── entries
        ├── docs/
        │   └── guide.md
        ├── src/
        │   ├── api/
        │   │   ├── auth.py
        │   │   └── user.py
        │   └── models/
        │       └── user.py
        └── README.md
    """
    root = tmp_path / "root"
    (root / ".svn").mkdir(parents=True)
    (root / ".svn" / "entries").write_text("svn")
    (root / "docs").mkdir()
    (root / "docs" / "guide.md").write_text("guide")
    (root / "src" / "api").mkdir(parents=True)
    (root / "src" / "api" / "auth.py").write_text("auth")
    (root / "src" / "api" / "user.py").write_text("user")
    (root / "src" / "models").mkdir()
    (root / "src" / "models" / "user.py").write_text("user")
    (root / "README.md").write_text("readme")
    return root


def make_tar_gz(archive: Path, source: Path) -> Path:
    """Pack ``source`` (file or directory) into ``archive`` under its own name."""
    with tarfile.open(archive, "w:gz") as tar:
        tar.add(source, arcname=source.name)
    return archive


@pytest.fixture
def nested_archive(tmp_path: Path) -> Path:
    """Build ``ddd.tar.gz`` holding ``ccc/bbb.tar.gz`` holding ``aaa/world.txt``.

    Returns:
        Path: Directory containing ``ddd.tar.gz`` and nothing else.
    """
    inner = tmp_path / "stage_inner" / "aaa"
    inner.mkdir(parents=True)
    (inner / "world.txt").write_text("hello world")

    outer = tmp_path / "stage_outer" / "ccc"
    outer.mkdir(parents=True)
    make_tar_gz(outer / "bbb.tar.gz", inner)

    dest = tmp_path / "archives"
    dest.mkdir()
    make_tar_gz(dest / "ddd.tar.gz", outer)
    return dest


@pytest.fixture
def zip_tree(tmp_path: Path) -> Path:
    """Directory with ``bundle.zip`` holding ``lib/core.py`` and ``setup.cfg``."""
    root = tmp_path / "zipped"
    root.mkdir()
    with zipfile.ZipFile(root / "bundle.zip", "w") as zf:
        zf.writestr("lib/core.py", "core")
        zf.writestr("setup.cfg", "[metadata]")
    return root


@pytest.fixture
def isolated_tempdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``tempfile`` at a private directory so extractions can be counted."""
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setenv("TMPDIR", str(scratch))
    monkeypatch.setattr("tempfile.tempdir", None)
    return scratch


def extraction_dirs(scratch: Path) -> list[str]:
    """Return names of extraction dirs currently alive under ``scratch``."""
    return sorted(name for name in os.listdir(scratch) if name.startswith(TEMP_PREFIX))


def rel(paths: list[str], base: Path) -> list[str]:
    """Express paths relative to ``base`` with forward slashes."""
    return [os.path.relpath(p, base).replace(os.sep, "/") for p in paths]
