"""Session - the live state of a mounted filesystem and its operations."""

import logging
from pathlib import Path as FilePath
from typing import Any, List, Optional, Union

import jmespath

from mapfs.storage.persistence import PersistenceManager
from mapfs.vfs.base import DirectoryNode, Node
from mapfs.vfs.resolver import NotADirectoryError, Path, PathLike, PathResolver, format_path
from mapfs.vfs.results import OpResult, ResultKind
from mapfs.vfs.tree import assoc_in, dissoc_in, from_data, get_in, is_directory, to_data

logger = logging.getLogger(__name__)


class Session:
    """A mounted filesystem: root, working directory and bound file.

    This is the main entry point for the VFS. Each field is replaced as
    a whole: mutations build a new root and assign it in one step, so a
    reference to an older root remains a complete snapshot.

    Usage:
        session = Session()
        session.mkdir("a")
        session.cd("a")
        session.put("x", 1)
        session.cat("x")  # 1

    Attributes:
        root: Root directory of the tree
        current: Current working directory (absolute path tuple)
        filename: File bound by the last successful load, if any
    """

    def __init__(
        self,
        root: Optional[Any] = None,
        persistence: Optional[PersistenceManager] = None,
    ):
        """Initialize a session.

        Args:
            root: Initial tree (node or plain data); empty directory if None
            persistence: Manager used by load/save/write
        """
        self.root: DirectoryNode = DirectoryNode() if root is None else self._as_root(root)
        self.current: Path = ()
        self.filename: Optional[str] = None
        self.resolver = PathResolver()
        self.persistence = persistence or PersistenceManager()

    @staticmethod
    def _as_root(tree: Any) -> DirectoryNode:
        node = from_data(tree)
        if not isinstance(node, DirectoryNode):
            raise TypeError(f"Cannot mount {type(tree).__name__} as a filesystem root")
        return node

    def resolve(self, path: Optional[PathLike] = None) -> Path:
        """Resolve a path against the current directory.

        Args:
            path: Path string, segment sequence, or None for the current directory

        Returns:
            Absolute path tuple
        """
        return self.resolver.resolve_pathlike(self.current, path)

    def get_node(self, path: Optional[PathLike] = None) -> Optional[Node]:
        """Resolve a path to a node.

        Returns:
            Resolved node or None
        """
        return get_in(self.root, self.resolve(path))

    def mount(self, tree: Any) -> OpResult:
        """Mount a tree (node or plain nested mapping) as the filesystem."""
        self.root = self._as_root(tree)
        logger.debug(f"Mounted tree with {len(self.root)} top-level entries")
        return OpResult.success("Mounted filesystem", ())

    # Navigation

    def ls(self, path: Optional[PathLike] = None) -> str:
        """List a directory, one ``D name`` or ``- name`` line per child.

        Args:
            path: Path to list (default: current directory)

        Returns:
            Listing, or an empty string if the path is missing or a leaf
        """
        node = self.get_node(path)
        if not isinstance(node, DirectoryNode):
            return ""

        return "\n".join(
            f"{'D' if is_directory(child) else '-'} {name}"
            for name, child in node.items()
        )

    def pwd(self) -> Path:
        """Current working directory."""
        return self.current

    def cd(self, path: PathLike) -> OpResult:
        """Change working directory.

        The new path is not checked against the tree; later lookups under
        a missing directory simply find nothing.
        """
        self.current = self.resolve(path)
        return OpResult.success(f"Current path: {format_path(self.current)}", self.current)

    # Reading

    def cat(self, key: str) -> Any:
        """Value of the child `key` of the current directory.

        Returns:
            The stored value, plain data for a directory, or None if absent
        """
        node = get_in(self.root, self.current + (key,))
        if node is None:
            return None
        return to_data(node)

    def query(self, expression: str, path: Optional[PathLike] = None) -> Any:
        """Evaluate a JMESPath expression against a subtree.

        Args:
            expression: JMESPath expression, e.g. ``users[?age > `30`].name``
            path: Subtree to query (default: current directory)

        Returns:
            Expression result, or None if the path does not exist

        Raises:
            jmespath.exceptions.JMESPathError: If the expression is invalid
        """
        node = self.get_node(path)
        if node is None:
            return None
        return jmespath.search(expression, to_data(node))

    def complete(self, partial: str) -> List[str]:
        """Get tab completion candidates for a partial path."""
        return self.resolver.complete_path(self.root, self.current, partial)

    # Mutation

    def _store(self, path: Path, node: Node, message: str) -> OpResult:
        try:
            self.root = assoc_in(self.root, path, node)
        except NotADirectoryError as e:
            return OpResult.type_mismatch(f"path is not a directory: {format_path(e.path)}", e.path)

        logger.debug(f"Stored {node.node_type.value} at {format_path(path)}")
        return OpResult.success(message, path)

    def cp(self, src: PathLike, dest: PathLike) -> OpResult:
        """Copy the node at `src` to `dest`.

        Missing directories along `dest` are created.
        """
        src_path = self.resolve(src)
        dest_path = self.resolve(dest)

        node = get_in(self.root, src_path)
        if node is None:
            return OpResult.not_found(format_path(src_path), src_path)

        return self._store(
            dest_path,
            node,
            f"Copied value from {format_path(src_path)} to {format_path(dest_path)}",
        )

    def put(self, key: str, value: Any) -> OpResult:
        """Store `value` under `key` in the current directory, replacing any entry."""
        path = self.current + (key,)
        return self._store(path, from_data(value), f"Stored value at {format_path(path)}")

    def mkdir(self, key: str) -> OpResult:
        """Create an empty directory under `key`, replacing any entry."""
        path = self.current + (key,)
        return self._store(path, DirectoryNode(), f"New path created: {format_path(path)}")

    def rename(self, src: PathLike, dest: PathLike) -> OpResult:
        """Move the node at `src` to `dest`.

        The source entry is removed from its own parent, which need not
        be the current directory.
        """
        src_path = self.resolve(src)
        dest_path = self.resolve(dest)

        if not src_path:
            return OpResult.type_mismatch("cannot move the root directory", src_path)

        node = get_in(self.root, src_path)
        if node is None:
            return OpResult.not_found(format_path(src_path), src_path)

        message = f"Renamed from {format_path(src_path)} to {format_path(dest_path)}"
        if src_path == dest_path:
            return OpResult.success(message, dest_path)

        if dest_path[:len(src_path)] == src_path:
            return OpResult.type_mismatch(
                f"cannot move {format_path(src_path)} into itself", dest_path
            )

        # Remove first: when dest is an ancestor of src, the copy replaces src's parent
        try:
            new_root = assoc_in(dissoc_in(self.root, src_path), dest_path, node)
        except NotADirectoryError as e:
            return OpResult.type_mismatch(f"path is not a directory: {format_path(e.path)}", e.path)

        self.root = new_root
        logger.debug(message)
        return OpResult.success(message, dest_path)

    mv = rename

    def _remove(self, path: Path) -> OpResult:
        self.root = dissoc_in(self.root, path)
        logger.debug(f"Removed {format_path(path)}")
        return OpResult.success(f"Path removed: {format_path(path)}", path)

    def rmdir(self, key: PathLike) -> OpResult:
        """Remove a directory."""
        path = self.resolve(key)
        node = get_in(self.root, path)

        if node is None:
            return OpResult.not_found(format_path(path), path)
        if not isinstance(node, DirectoryNode):
            return OpResult.type_mismatch(f"path is not a directory: {format_path(path)}", path)
        if not path:
            return OpResult.type_mismatch("cannot remove the root directory", path)

        return self._remove(path)

    def rm(self, key: PathLike) -> OpResult:
        """Remove a leaf value."""
        path = self.resolve(key)
        node = get_in(self.root, path)

        if node is None:
            return OpResult.not_found(format_path(path), path)
        if isinstance(node, DirectoryNode):
            return OpResult.type_mismatch(f"path is a directory: {format_path(path)}", path)

        return self._remove(path)

    # Persistence

    def load(self, filename: Union[str, FilePath]) -> OpResult:
        """Replace the tree with the contents of a file and bind it for `save`.

        Raises:
            FileNotFoundError: If the file does not exist
            CodecError: If the file content is malformed
        """
        root = self.persistence.read(filename)
        self.root = root
        self.filename = str(filename)
        return OpResult.success(f"Loaded filesystem from: {filename}", ())

    def write(self, filename: Union[str, FilePath]) -> OpResult:
        """Write the tree to `filename`, overwriting it."""
        self.persistence.write(self.root, filename)
        return OpResult.success(f"Wrote filesystem to: {filename}", ())

    def save(self) -> OpResult:
        """Write the tree back to the file it was loaded from."""
        if self.filename is None:
            return OpResult(
                ResultKind.NOT_LOADED, "Error: current filesystem not loaded from file"
            )

        self.persistence.write(self.root, self.filename)
        return OpResult.success(f"Saved filesystem to: {self.filename}", ())
