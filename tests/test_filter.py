"""Tests for filenext.filter."""

from pathlib import Path

import pytest

from filenext import FilterContext, files
from filenext.filter import PatternFilter
from tests.conftest import rel


def _ctx(name: str, dir: str | None = "/r") -> FilterContext:
    full_path = f"{dir}/{name}" if dir else name
    return FilterContext(name=name, dir=dir, full_path=full_path)


class TestPatternFilter:
    def test_no_patterns_excludes_nothing(self) -> None:
        f = PatternFilter()
        assert f.should_exclude("foo.py") is False
        assert f(_ctx("node_modules")) is True

    @pytest.mark.parametrize(
        ("patterns", "name", "expected"),
        [
            (["node_modules"], "node_modules", True),
            (["node_modules"], "src", False),
            (["*.pyc"], "foo.pyc", True),
            (["*.pyc"], "foo.py", False),
            (["test_*"], "test_foo.py", True),
            (["test_*"], "foo_test.py", False),
        ],
    )
    def test_pattern_matching(self, patterns: list[str], name: str, expected: bool) -> None:
        f = PatternFilter(patterns)
        assert f.should_exclude(name) is expected
        assert f(_ctx(name)) is not expected

    def test_include_mode(self) -> None:
        f = PatternFilter(["*.py"], include=True)
        assert f(_ctx("app.py")) is True
        assert f(_ctx("README.md")) is False

    def test_starting_file_uses_basename(self) -> None:
        f = PatternFilter(["*.md"])
        assert f(_ctx("some/dir/README.md", dir=None)) is False

    def test_starting_dir_uses_full_path(self) -> None:
        f = PatternFilter(["build"])
        ctx = FilterContext(name=None, dir="out/build", full_path="out/build")
        assert f(ctx) is False


class TestPatternFilterTraversal:
    def test_as_file_filter(self, sample_tree: Path) -> None:
        found = rel(list(files(sample_tree, file_filter=PatternFilter(["*.py"], include=True))), sample_tree)
        assert sorted(found) == ["src/api/auth.py", "src/api/user.py", "src/models/user.py"]

    def test_as_descend_filter(self, sample_tree: Path) -> None:
        found = rel(list(files(sample_tree, descend_filter=PatternFilter(["api", ".svn"]))), sample_tree)
        assert sorted(found) == ["README.md", "docs/guide.md", "src/models/user.py"]
