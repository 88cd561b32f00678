"""Path resolution for the Virtual File System.

Handles path parsing and navigation (cd, ls semantics).

A path inside the tree is a tuple of names from the root, e.g.
``("books", "42")``. Operators type paths as strings (``books/42``,
``../other``, ``/abs/path``) or hand over a sequence of segments; both
are turned into segments and folded onto a base path here.
"""

from typing import Iterable, List, Optional, Sequence, Tuple, Union

from mapfs.vfs.base import DirectoryNode

UP = ".."
CURRENT = "."
SEPARATOR = "/"

Path = Tuple[str, ...]
PathLike = Union[str, Sequence[str]]


class PathResolver:
    """Resolves paths in the VFS and handles navigation.

    This class provides the core navigation logic for cd, ls, etc.
    It handles:
    - Absolute paths: /books/42/title
    - Relative paths: ../other, ./files
    - Special segments: ., ..

    Resolution is purely lexical: it never looks at the tree, so a
    resolved path may point at nothing.
    """

    def resolve(self, base: Sequence[str], segments: Iterable[str]) -> Path:
        """Fold path segments onto a base path.

        Args:
            base: Absolute path to start from
            segments: Names to append, ``..`` to drop the last element

        Returns:
            New absolute path
        """
        path: List[str] = list(base)
        for segment in segments:
            if segment == UP:
                # Stay at root if already at root
                if path:
                    path.pop()
            else:
                path.append(segment)
        return tuple(path)

    def resolve_pathlike(self, base: Sequence[str], path: Optional[PathLike]) -> Path:
        """Resolve a string or segment sequence against a base path.

        Args:
            base: Current absolute path
            path: Path string, sequence of segments, or None for `base`

        Returns:
            Resolved absolute path
        """
        if path is None:
            return tuple(base)

        if isinstance(path, str):
            absolute, segments = self.parse(path)
            return self.resolve(() if absolute else base, segments)

        return self.resolve(base, path)

    def parse(self, path: str) -> Tuple[bool, List[str]]:
        """Parse a path string into segments.

        Args:
            path: Path like "a/b", "/a/../b" or ".."

        Returns:
            Tuple of (is_absolute, segments)
        """
        absolute = path.startswith(SEPARATOR)
        segments = [
            part for part in path.split(SEPARATOR)
            if part not in ("", CURRENT)
        ]
        return absolute, segments

    def complete_path(
        self,
        root: DirectoryNode,
        current: Sequence[str],
        partial: str,
    ) -> List[str]:
        """Get completion candidates for a partial path.

        Used for tab completion.

        Args:
            root: Root of the tree
            current: Current working directory
            partial: Partial path to complete

        Returns:
            List of completion candidates
        """
        from mapfs.vfs.tree import get_in

        # Split into directory part and name part
        if SEPARATOR in partial:
            dir_part, name_part = partial.rsplit(SEPARATOR, 1)
            prefix = dir_part + SEPARATOR
            dir_path = self.resolve_pathlike(current, dir_part or SEPARATOR)
        else:
            name_part = partial
            prefix = ""
            dir_path = tuple(current)

        dir_node = get_in(root, dir_path)
        if not isinstance(dir_node, DirectoryNode):
            return []

        candidates = []
        for name in complete_names(dir_node.child_names(), name_part):
            candidate = prefix + name
            # Add trailing slash for directories
            if isinstance(dir_node.get_child(name), DirectoryNode):
                candidate += SEPARATOR
            candidates.append(candidate)

        return candidates


def complete_names(names: Iterable[str], prefix: str) -> List[str]:
    """Names starting with `prefix` (all of them for an empty prefix)."""
    if not prefix:
        return list(names)
    return [name for name in names if name.startswith(prefix)]


def format_path(path: Sequence[str]) -> str:
    """Render a path tuple as ``/a/b`` (``/`` for the root)."""
    return SEPARATOR + SEPARATOR.join(path)


class PathError(Exception):
    """Error resolving a path."""

    def __init__(self, message: str, path: Sequence[str] = ()):
        super().__init__(message)
        self.path = tuple(path)


class NotADirectoryError(PathError):
    """A path crosses or targets a leaf where a directory is required."""
    pass


class NotFoundError(PathError):
    """Path does not exist."""
    pass
