"""
Tests for VFS PathResolver.

Tests focus on:
- Segment folding (append, up-marker, clamping at the root)
- Path string parsing (absolute, relative, special segments)
- Tab completion
- Error types

These tests verify behavior, not implementation details.
"""

import pytest

from mapfs.vfs.resolver import (
    UP,
    NotADirectoryError,
    NotFoundError,
    PathError,
    PathResolver,
    complete_names,
    format_path,
)
from mapfs.vfs.tree import from_data


@pytest.fixture
def resolver():
    return PathResolver()


@pytest.fixture
def simple_tree():
    """Create a small tree for completion tests.

    Structure:
        /
        ├── alpha/
        │   └── one
        ├── alps
        └── beta/
    """
    return from_data({"alpha": {"one": 1}, "alps": 2, "beta": {}})


class TestResolve:
    """Test folding segments onto a base path."""

    def test_append_segments(self, resolver):
        assert resolver.resolve((), ["a"]) == ("a",)
        assert resolver.resolve(("a",), ["b", "c"]) == ("a", "b", "c")

    def test_up_marker_drops_previous_segment(self, resolver):
        assert resolver.resolve(("a",), ["b", UP, "c"]) == ("a", "c")

    @pytest.mark.parametrize("base", [(), ("x",), ("x", "y")])
    def test_key_then_up_returns_base(self, resolver, base):
        """
        Given: Any base path
        When: Appending a key and then the up-marker
        Then: The result is the base path
        """
        assert resolver.resolve(base, ["k", UP]) == base

    def test_up_at_root_stays_at_root(self, resolver):
        assert resolver.resolve((), [UP]) == ()
        assert resolver.resolve((), [UP, UP, "a"]) == ("a",)

    def test_up_past_root_from_nested_path(self, resolver):
        assert resolver.resolve(("a",), [UP, UP, "b"]) == ("b",)

    def test_resolve_does_not_mutate_base(self, resolver):
        base = ["a", "b"]
        resolver.resolve(base, [UP, UP])

        assert base == ["a", "b"]

    def test_result_is_tuple(self, resolver):
        assert isinstance(resolver.resolve(["a"], ["b"]), tuple)


class TestParse:
    """Test path string parsing."""

    def test_relative_path(self, resolver):
        assert resolver.parse("a/b") == (False, ["a", "b"])

    def test_absolute_path(self, resolver):
        assert resolver.parse("/a/b") == (True, ["a", "b"])

    def test_dot_and_empty_segments_are_ignored(self, resolver):
        assert resolver.parse("/a/./b//") == (True, ["a", "b"])

    def test_up_marker_is_kept(self, resolver):
        assert resolver.parse("../a") == (False, [UP, "a"])

    def test_root_and_empty(self, resolver):
        assert resolver.parse("/") == (True, [])
        assert resolver.parse("") == (False, [])


class TestResolvePathlike:
    """Test resolving operator paths against a current directory."""

    def test_none_is_current_directory(self, resolver):
        assert resolver.resolve_pathlike(("a",), None) == ("a",)

    def test_relative_string(self, resolver):
        assert resolver.resolve_pathlike(("a",), "b/c") == ("a", "b", "c")

    def test_absolute_string_ignores_current(self, resolver):
        assert resolver.resolve_pathlike(("a",), "/b") == ("b",)

    def test_parent_string(self, resolver):
        assert resolver.resolve_pathlike(("a", "b"), "../c") == ("a", "c")

    def test_segment_sequence_is_relative(self, resolver):
        assert resolver.resolve_pathlike(("a",), ["x", "y"]) == ("a", "x", "y")

    def test_segment_sequence_keeps_slashes_literal(self, resolver):
        assert resolver.resolve_pathlike((), ["a/b"]) == ("a/b",)


class TestCompletion:
    """Test tab completion."""

    def test_complete_names_with_prefix(self):
        assert complete_names(["alpha", "beta", "alps"], "al") == ["alpha", "alps"]

    def test_complete_names_empty_prefix_returns_all(self):
        assert complete_names(["b", "a"], "") == ["b", "a"]

    def test_complete_names_no_match(self):
        assert complete_names(["alpha"], "z") == []

    def test_complete_path_in_current_directory(self, resolver, simple_tree):
        assert resolver.complete_path(simple_tree, (), "al") == ["alpha/", "alps"]

    def test_complete_path_with_directory_part(self, resolver, simple_tree):
        assert resolver.complete_path(simple_tree, (), "alpha/o") == ["alpha/one"]

    def test_complete_path_from_subdirectory(self, resolver, simple_tree):
        assert resolver.complete_path(simple_tree, ("alpha",), "") == ["one"]

    def test_complete_absolute_path(self, resolver, simple_tree):
        assert resolver.complete_path(simple_tree, ("alpha",), "/b") == ["/beta/"]

    def test_complete_below_leaf_is_empty(self, resolver, simple_tree):
        assert resolver.complete_path(simple_tree, (), "alps/x") == []

    def test_complete_missing_directory_is_empty(self, resolver, simple_tree):
        assert resolver.complete_path(simple_tree, (), "missing/") == []


class TestFormatAndErrors:
    """Test path rendering and error classes."""

    def test_format_root(self):
        assert format_path(()) == "/"

    def test_format_nested(self):
        assert format_path(("a", "b")) == "/a/b"

    def test_errors_carry_path(self):
        error = NotFoundError("path not found", ["a", "b"])

        assert isinstance(error, PathError)
        assert error.path == ("a", "b")
        assert str(error) == "path not found"

    def test_not_a_directory_is_path_error(self):
        assert issubclass(NotADirectoryError, PathError)
