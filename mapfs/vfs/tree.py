"""Tree lookups and copy-on-write updates.

Every update rebuilds only the DirectoryNodes on the path from the
target up to the root; siblings off that path are reused as-is. The
caller swaps the returned root in one assignment.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Callable, Optional

from mapfs.vfs.base import DirectoryNode, LeafNode, Node
from mapfs.vfs.resolver import NotADirectoryError, NotFoundError

# Reserved field marking a map-shaped value as a leaf ("opaque tagged value")
LEAF_TAG = "tag"


def is_directory(node: Optional[Node]) -> bool:
    """Check if a node is a directory."""
    return isinstance(node, DirectoryNode)


def get_in(root: DirectoryNode, path: Sequence) -> Optional[Node]:
    """Look up the node at `path`.

    Args:
        root: Root directory
        path: Absolute path as a sequence of names

    Returns:
        The node, or None if the path is missing or crosses a leaf
    """
    node: Node = root
    for name in path:
        if not isinstance(node, DirectoryNode):
            return None
        node = node.get_child(name)
        if node is None:
            return None
    return node


def assoc_in(root: DirectoryNode, path: Sequence, node: Node) -> DirectoryNode:
    """Return a new root with `node` stored at `path`.

    Missing intermediate directories are created.

    Raises:
        NotADirectoryError: If an ancestor on the path is a leaf, or the
            path is the root and `node` is not a directory
    """
    if not path:
        if not isinstance(node, DirectoryNode):
            raise NotADirectoryError("root must be a directory", path)
        return node
    return _assoc(root, tuple(path), 0, node)


def _assoc(directory: DirectoryNode, path: tuple, depth: int, node: Node) -> DirectoryNode:
    name = path[depth]
    if depth == len(path) - 1:
        return directory.assoc(name, node)

    child = directory.get_child(name)
    if child is None:
        child = DirectoryNode()
    elif not isinstance(child, DirectoryNode):
        raise NotADirectoryError("path is not a directory", path[:depth + 1])

    return directory.assoc(name, _assoc(child, path, depth + 1, node))


def dissoc_in(root: DirectoryNode, path: Sequence) -> DirectoryNode:
    """Return a new root without the entry at `path`.

    The entry is removed from its true parent, ``path[:-1]``.

    Raises:
        NotFoundError: If the entry does not exist
        NotADirectoryError: If `path` is the root
    """
    path = tuple(path)
    if not path:
        raise NotADirectoryError("cannot remove the root directory", path)

    parent = get_in(root, path[:-1])
    if not isinstance(parent, DirectoryNode) or path[-1] not in parent:
        raise NotFoundError("path not found", path)

    if len(path) == 1:
        return root.dissoc(path[0])
    return assoc_in(root, path[:-1], parent.dissoc(path[-1]))


def is_tagged(data: Mapping, tag_key: Any = LEAF_TAG) -> bool:
    """Check if a mapping carries a truthy leaf discriminator."""
    return bool(data.get(tag_key))


def from_data(
    data: Any,
    tag_key: Any = LEAF_TAG,
    key_fn: Callable[[Any], str] = str,
    value_fn: Callable[[Any], Any] = lambda value: value,
) -> Node:
    """Convert nested plain data into nodes.

    Untagged mappings become directories, everything else becomes a
    leaf. Nodes are passed through unchanged.

    Args:
        data: Nested data (dicts, lists, scalars, or nodes)
        tag_key: Key of the leaf discriminator field
        key_fn: Converts a mapping key into a child name
        value_fn: Normalizes a leaf value

    Returns:
        The root node of the converted data
    """
    if isinstance(data, Node):
        return data
    if isinstance(data, Mapping) and not is_tagged(data, tag_key):
        return DirectoryNode({
            key_fn(key): from_data(value, tag_key, key_fn, value_fn)
            for key, value in data.items()
        })
    return LeafNode(value_fn(data))


def to_data(
    node: Node,
    key_fn: Callable[[str], Any] = lambda key: key,
    value_fn: Callable[[Any], Any] = lambda value: value,
) -> Any:
    """Convert nodes back into nested plain data.

    Args:
        node: Node to convert
        key_fn: Converts a child name into a mapping key
        value_fn: Converts a leaf value for the target format

    Returns:
        Dicts for directories, stored values for leaves
    """
    if isinstance(node, DirectoryNode):
        return {key_fn(name): to_data(child, key_fn, value_fn) for name, child in node.items()}
    return value_fn(node.value)
