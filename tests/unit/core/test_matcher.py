"""Unit tests for PathMatcher."""

from pathlib import Path

from stalesweep.core.matcher import PathMatcher


class TestPathMatcher:
    """Tests for ignored path matching."""

    def test_empty_matcher_ignores_nothing(self) -> None:
        """Without ignored paths nothing matches."""
        matcher = PathMatcher()
        assert not matcher
        assert matcher.is_ignored("/anything") is False

    def test_exact_match(self) -> None:
        """The ignored path itself is ignored."""
        matcher = PathMatcher(["/data/keep"])
        assert matcher.is_ignored("/data/keep") is True

    def test_descendant_match(self) -> None:
        """Everything below an ignored path is ignored."""
        matcher = PathMatcher(["/data/keep"])
        assert matcher.is_ignored("/data/keep/a/b.txt") is True

    def test_component_boundary(self) -> None:
        """A shared string prefix without a component boundary does not match."""
        matcher = PathMatcher(["/foo/bar"])
        assert matcher.is_ignored("/foo/barbaz") is False
        assert matcher.is_ignored("/foo/bar/baz") is True

    def test_parent_not_ignored(self) -> None:
        """Ancestors of an ignored path are not ignored."""
        matcher = PathMatcher(["/data/keep"])
        assert matcher.is_ignored("/data") is False

    def test_normalizes_paths(self) -> None:
        """Redundant separators and dot segments are normalized on both sides."""
        matcher = PathMatcher(["/data//keep/./"])
        assert matcher.is_ignored("/data/other/../keep/file") is True

    def test_relative_paths(self, tmp_path: Path, monkeypatch) -> None:
        """Relative paths are made absolute against the working directory."""
        monkeypatch.chdir(tmp_path)
        matcher = PathMatcher(["keep"])
        assert matcher.is_ignored(tmp_path / "keep" / "x") is True

    def test_duplicates_collapsed(self) -> None:
        """Duplicate ignored paths are stored once."""
        matcher = PathMatcher(["/a", "/a/", Path("/a")])
        assert len(matcher.ignored_paths) == 1

    def test_multiple_ignored_paths(self) -> None:
        """Any matching ignored path is enough."""
        matcher = PathMatcher(["/a", "/b"])
        assert matcher.is_ignored("/b/c") is True
        assert matcher.is_ignored("/c") is False
