"""
linebasic Error Taxonomy

Every failure inside the interpreter core is raised as a BasicError subclass.
Nothing in the core catches them; the front end decides whether to abort,
report and continue, or stop the current run.

Key classes:
- ErrorKind: The kind of failure
- BasicError: Base exception carrying kind, message and line
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    SYNTAX = "SYNTAX"
    UNDEFINED_REFERENCE = "UNDEFINED_REFERENCE"
    STACK_EXHAUSTED = "STACK_EXHAUSTED"
    FRAME_MISMATCH = "FRAME_MISMATCH"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    RESOURCE = "RESOURCE"


class BasicError(Exception):
    """Base class for interpreter errors."""

    kind: ErrorKind = ErrorKind.SYNTAX

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is not None:
            return f"{self.message} (line {self.line})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "line": self.line,
        }


class BasicSyntaxError(BasicError):
    """An expected token was absent."""
    kind = ErrorKind.SYNTAX


class UndefinedLineError(BasicError):
    """GOTO/GOSUB/RETURN to a line that is not stored."""
    kind = ErrorKind.UNDEFINED_REFERENCE


class StackExhaustedError(BasicError):
    """A frame push would collide with program storage."""
    kind = ErrorKind.STACK_EXHAUSTED


class FrameMismatchError(BasicError):
    """RETURN/NEXT found the wrong frame kind or loop variable."""
    kind = ErrorKind.FRAME_MISMATCH


class TypeMismatchError(BasicError):
    kind = ErrorKind.TYPE_MISMATCH


class ResourceExhaustedError(BasicError):
    kind = ErrorKind.RESOURCE
