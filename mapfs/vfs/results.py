"""Result values returned by VFS operations.

Routine conditions (missing paths, wrong node type, no bound file) are
reported as results rather than raised.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class ResultKind(Enum):
    """Outcome of an operation."""
    OK = "ok"
    NOT_FOUND = "not_found"
    TYPE_MISMATCH = "type_mismatch"
    NOT_LOADED = "not_loaded"


@dataclass(frozen=True)
class OpResult:
    """Human-readable status of an operation.

    Attributes:
        kind: Outcome category
        message: Text shown to the operator
        path: Path the operation acted on, if any
    """
    kind: ResultKind
    message: str
    path: Optional[Tuple[str, ...]] = None

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK

    def __str__(self) -> str:
        return self.message

    @classmethod
    def success(cls, message: str, path: Optional[Tuple[str, ...]] = None) -> "OpResult":
        return cls(ResultKind.OK, message, path)

    @classmethod
    def not_found(cls, path_text: str, path: Optional[Tuple[str, ...]] = None) -> "OpResult":
        return cls(ResultKind.NOT_FOUND, f"Error: path not found: {path_text}", path)

    @classmethod
    def type_mismatch(cls, message: str, path: Optional[Tuple[str, ...]] = None) -> "OpResult":
        return cls(ResultKind.TYPE_MISMATCH, f"Error: {message}", path)
