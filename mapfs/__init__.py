"""
mapfs - browse and edit nested data as if it were a directory tree.

Main API:
    from mapfs import Session

    # Open a filesystem file (EDN, JSON or YAML)
    session = Session()
    session.load("data.edn")

    # Navigate and edit
    session.mkdir("notes")
    session.cd("notes")
    session.put("today", "write tests")
    print(session.ls("/"))

    # Write back to the loaded file
    session.save()
"""

from .vfs import DirectoryNode, LeafNode, OpResult, ResultKind, Session

__version__ = "0.1.0"
__all__ = ["Session", "DirectoryNode", "LeafNode", "OpResult", "ResultKind"]
