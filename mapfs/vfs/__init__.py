"""Virtual File System over an in-memory nested map.

The VFS presents arbitrary nested data as a directory tree that can be
navigated and edited with familiar shell verbs.

Architecture:

    ```
    /                           # Root (DirectoryNode)
    ├── config/                 # A nested map (DirectoryNode)
    │   ├── port                # A scalar (LeafNode)
    │   └── hosts               # A vector (LeafNode)
    ├── users/
    │   └── alice/
    │       └── avatar          # A map tagged with :tag (LeafNode)
    └── notes                   # A string (LeafNode)
    ```

Node Types:

    - Node: Base class for all VFS entries
    - DirectoryNode: Can contain children (cd into them)
    - LeafNode: Opaque stored value (cat them)

Path Resolution:

    The PathResolver handles navigation:
    - Absolute paths: /config/port
    - Relative paths: ../other, ./files
    - Special: ., ..  (``..`` at the root stays at the root)
    - Tab completion support

Usage Example:

    ```python
    from mapfs.vfs import Session

    session = Session()
    session.load("data.edn")

    session.cd("config")
    print(session.ls())          # "- port\\n- hosts"
    print(session.cat("port"))   # 8080

    session.put("port", 9090)
    session.cp("port", "/backup/port")
    session.save()
    ```
"""

from mapfs.vfs.base import DirectoryNode, LeafNode, Node, NodeType
from mapfs.vfs.resolver import (
    UP,
    NotADirectoryError,
    NotFoundError,
    PathError,
    PathResolver,
    complete_names,
    format_path,
)
from mapfs.vfs.results import OpResult, ResultKind
from mapfs.vfs.tree import LEAF_TAG, assoc_in, dissoc_in, from_data, get_in, is_directory, to_data
from mapfs.vfs.session import Session

__all__ = [
    # Main entry point
    "Session",
    # Core classes
    "Node",
    "DirectoryNode",
    "LeafNode",
    "NodeType",
    # Path resolution
    "PathResolver",
    "PathError",
    "NotADirectoryError",
    "NotFoundError",
    "UP",
    "complete_names",
    "format_path",
    # Tree operations
    "LEAF_TAG",
    "get_in",
    "assoc_in",
    "dissoc_in",
    "from_data",
    "to_data",
    "is_directory",
    # Results
    "OpResult",
    "ResultKind",
]
