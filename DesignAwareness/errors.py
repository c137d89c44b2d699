"""Error kinds, violation records and exceptions shared by every component."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence


class ErrorKind(str, Enum):
    FORMAT = "FormatError"
    STRUCTURAL = "StructuralError"
    RANGE = "RangeError"
    ORDERING = "OrderingError"
    REFERENTIAL = "ReferentialError"
    UNKNOWN_TYPE = "UnknownTypeError"


@dataclass(frozen=True)
class Violation:
    """A single problem found in a document, located by a path such as
    ``sessions[2].data[0][1]`` (relative to the envelope's ``data``)."""

    kind: ErrorKind
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value} at {self.path or '<root>'}: {self.message}"


def join_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


class DesignAwarenessError(ValueError):
    kind: ErrorKind = ErrorKind.STRUCTURAL

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.message = message
        self.path = path

    @property
    def violation(self) -> Violation:
        return Violation(self.kind, self.path, self.message)


class EnvelopeError(DesignAwarenessError):
    """Raised when the top-level wrapper cannot be accepted."""


class FormatError(EnvelopeError):
    kind = ErrorKind.FORMAT


class StructuralError(EnvelopeError):
    kind = ErrorKind.STRUCTURAL


class UnknownTypeError(EnvelopeError):
    kind = ErrorKind.UNKNOWN_TYPE


class DocumentError(DesignAwarenessError):
    """Raised by the pipeline when a document has one or more violations."""

    def __init__(self, violations: Sequence[Violation]):
        self.violations: List[Violation] = list(violations)
        first = self.violations[0] if self.violations else None
        summary = f"{len(self.violations)} violation(s)"
        if first is not None:
            summary += f"; first: {first}"
        super().__init__(summary, first.path if first else "")
        if first is not None:
            self.kind = first.kind
