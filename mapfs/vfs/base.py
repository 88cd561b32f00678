"""Base classes for the Virtual File System.

The VFS holds an arbitrary nested map in memory and exposes it as a
filesystem-like tree that can be navigated with shell commands
(cd, ls, cat, etc.).

Architecture:
    - Node: Base class for all VFS nodes
    - DirectoryNode: Nodes that can contain children (cd into them)
    - LeafNode: Opaque stored values (cat them, never traversed into)

Nodes are immutable. A mutation never edits a node in place; it builds
new DirectoryNodes along the changed path and reuses every other child
object unchanged.
"""

from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple


class NodeType(Enum):
    """Type of VFS node."""
    DIRECTORY = "directory"
    LEAF = "leaf"


class Node(ABC):
    """Base class for all VFS nodes.

    A Node is an entry in the virtual filesystem. It does not know its
    own name or parent: names live in the parent's mapping, which lets
    the same node object be shared by several snapshots of the tree.

    Attributes:
        node_type: Type of node (directory or leaf)
    """

    def __init__(self, node_type: NodeType):
        self.node_type = node_type

    @abstractmethod
    def get_info(self) -> Dict[str, Any]:
        """Get metadata about this node for display.

        Returns:
            Dict with keys like: type, children_count, preview
        """
        pass


class DirectoryNode(Node):
    """A directory node that can contain children.

    Directory nodes can be navigated into with `cd` and their
    children can be listed with `ls`. Children keep insertion order.
    """

    def __init__(self, children: Optional[Mapping[str, Node]] = None):
        """Initialize a directory node.

        Args:
            children: Mapping of child name to node (copied)
        """
        super().__init__(NodeType.DIRECTORY)
        self._children = MappingProxyType(dict(children or {}))

    @property
    def children(self) -> Mapping[str, Node]:
        """Read-only view of the children."""
        return self._children

    def get_child(self, name: str) -> Optional[Node]:
        """Get a child node by name.

        Args:
            name: Name of child node

        Returns:
            Child node or None if not found
        """
        return self._children.get(name)

    def child_names(self) -> List[str]:
        """Names of all children in insertion order."""
        return list(self._children)

    def items(self) -> Iterator[Tuple[str, Node]]:
        return iter(self._children.items())

    def assoc(self, name: str, node: Node) -> "DirectoryNode":
        """Return a copy of this directory with `name` bound to `node`.

        An existing entry keeps its position; a new one is appended.
        """
        children = dict(self._children)
        children[name] = node
        return DirectoryNode(children)

    def dissoc(self, name: str) -> "DirectoryNode":
        """Return a copy of this directory without `name`."""
        if name not in self._children:
            return self
        children = dict(self._children)
        del children[name]
        return DirectoryNode(children)

    def get_info(self) -> Dict[str, Any]:
        """Get directory metadata.

        Returns:
            Dict with directory information
        """
        return {
            "type": "directory",
            "children_count": len(self._children),
        }

    def __len__(self) -> int:
        return len(self._children)

    def __contains__(self, name: object) -> bool:
        return name in self._children

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DirectoryNode):
            return NotImplemented
        return dict(self._children) == dict(other._children)

    __hash__ = None

    def __repr__(self) -> str:
        return f"DirectoryNode({dict(self._children)!r})"


class LeafNode(Node):
    """A leaf node holding an opaque value.

    Leaves are read with `cat` and written with `put`. They are never
    traversed into, even when the value itself is a mapping.
    """

    PREVIEW_LENGTH = 60

    def __init__(self, value: Any):
        """Initialize a leaf node.

        Args:
            value: Stored value
        """
        super().__init__(NodeType.LEAF)
        self._value = value

    @property
    def value(self) -> Any:
        return self._value

    def get_info(self) -> Dict[str, Any]:
        """Get leaf metadata with a value preview."""
        text = repr(self._value)
        if len(text) > self.PREVIEW_LENGTH:
            text = text[:self.PREVIEW_LENGTH] + "..."
        return {
            "type": "leaf",
            "value_type": type(self._value).__name__,
            "preview": text,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LeafNode):
            return NotImplemented
        return self._value == other._value

    __hash__ = None

    def __repr__(self) -> str:
        return f"LeafNode({self._value!r})"
