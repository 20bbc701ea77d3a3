"""
linebasic Runtime State Management

State tracks the value model, the control-flow frames and the arena shared by
program storage and the control stack.

Key classes:
- Value: Tagged numeric/text value
- Position: (line, offset) cursor into a program line
- LoopFrame / CallFrame: Control-flow frames
- Arena: Fixed-size region split between program text and stack
- ControlStack: Downward-growing frame stack living in the arena
- RuntimeState: Per-interpreter execution context
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any, List, Optional, ClassVar
from enum import Enum
import logging
import math

from linebasic.errors import (
    FrameMismatchError,
    ResourceExhaustedError,
    StackExhaustedError,
    TypeMismatchError,
)

logger = logging.getLogger(__name__)

# Byte costs charged against the arena.
LINE_HEADER_SIZE = 4
LOOP_FRAME_SIZE = 40
CALL_FRAME_SIZE = 16


class ValueType(Enum):
    NUMERIC = "NUMERIC"
    TEXT = "TEXT"


@dataclass(frozen=True)
class Value:
    """
    Result of evaluating an expression.

    Exactly one of the two variants: NUMERIC carries a float, TEXT a str.
    """
    value_type: ValueType
    value: Any

    @classmethod
    def numeric(cls, number: float) -> "Value":
        return cls(ValueType.NUMERIC, float(number))

    @classmethod
    def text(cls, string: str) -> "Value":
        return cls(ValueType.TEXT, str(string))

    def is_numeric(self) -> bool:
        return self.value_type == ValueType.NUMERIC

    def is_text(self) -> bool:
        return self.value_type == ValueType.TEXT

    def as_number(self) -> float:
        if not self.is_numeric():
            raise TypeMismatchError("Numeric value expected")
        return self.value

    def as_text(self) -> str:
        if not self.is_text():
            raise TypeMismatchError("String value expected")
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        return {"value_type": self.value_type.value, "value": self.value}


def to_integer(number: float) -> int:
    """
    Truncate a float toward zero for the bitwise operators.

    NaN and infinities have no integer value and are rejected.
    """
    if math.isnan(number) or math.isinf(number):
        raise TypeMismatchError(f"Cannot convert {number} to an integer")
    return int(number)


@dataclass(frozen=True)
class Position:
    """
    A cursor into program text.

    `line` is a stored line number, or None for the direct-mode line being
    executed. `offset` is a character offset into that line's text.
    """
    line: Optional[int]
    offset: int = 0


class FrameKind(Enum):
    LOOP = "LOOP"
    CALL = "CALL"


@dataclass
class LoopFrame:
    """FOR loop parameters. The running value always lives in the variable."""
    variable_name: str
    end_value: float
    step: float
    resume: Position
    kind: ClassVar[FrameKind] = FrameKind.LOOP
    size: ClassVar[int] = LOOP_FRAME_SIZE

    def is_finished(self, value: float) -> bool:
        return (self.step > 0 and value > self.end_value) or \
               (self.step < 0 and value < self.end_value)


@dataclass
class CallFrame:
    """GOSUB return point: the statement following the GOSUB."""
    resume: Position
    kind: ClassVar[FrameKind] = FrameKind.CALL
    size: ClassVar[int] = CALL_FRAME_SIZE


@dataclass
class Arena:
    """
    Fixed-size memory shared by program storage and the control stack.

    Program text grows upward from 0, the stack grows downward from
    `memory_size`. The stack may not drop below `memory_size - stack_size`
    and the two regions never overlap.
    """
    memory_size: int
    stack_size: int
    program_end: int = 0
    stack_top: int = 0

    def __post_init__(self):
        if self.stack_size <= 0 or self.stack_size >= self.memory_size:
            raise ValueError(
                f"stack_size must be between 1 and {self.memory_size - 1}, got {self.stack_size}"
            )
        self.stack_top = self.memory_size

    @property
    def stack_floor(self) -> int:
        return self.memory_size - self.stack_size

    @property
    def program_capacity(self) -> int:
        return self.stack_floor

    @property
    def stack_used(self) -> int:
        return self.memory_size - self.stack_top

    def reserve_program(self, size: int) -> None:
        """Grow program storage by `size` bytes."""
        if self.program_end + size > min(self.stack_floor, self.stack_top):
            raise ResourceExhaustedError("Out of memory.")
        self.program_end += size

    def release_program(self, size: int) -> None:
        self.program_end -= size

    def push(self, size: int) -> None:
        """Move the stack top down by `size` bytes."""
        new_top = self.stack_top - size
        if new_top < max(self.stack_floor, self.program_end):
            raise StackExhaustedError("Stack too small.")
        self.stack_top = new_top

    def pop(self, size: int) -> None:
        self.stack_top += size

    def reset_stack(self) -> None:
        self.stack_top = self.memory_size

    def to_dict(self) -> Dict[str, Any]:
        return {
            "memory_size": self.memory_size,
            "stack_size": self.stack_size,
            "program_used": self.program_end,
            "stack_used": self.stack_used,
        }


class ControlStack:
    """
    Stack of loop and call frames.

    Each push reserves the frame's byte cost in the arena and fails with
    "Stack too small." when that would cross into program storage.
    """

    def __init__(self, arena: Arena):
        self.arena = arena
        self.frames: List[Any] = []

    def __len__(self) -> int:
        return len(self.frames)

    def push(self, frame) -> None:
        self.arena.push(frame.size)
        self.frames.append(frame)
        logger.debug(f"[STACK] push {frame.kind.value} depth={len(self.frames)}")

    def peek(self, kind: FrameKind):
        """Return the top frame, which must be of `kind`."""
        if not self.frames or self.frames[-1].kind != kind:
            if kind == FrameKind.CALL:
                raise FrameMismatchError("Incorrect stack frame, expected gosub")
            raise FrameMismatchError("Incorrect stack frame, expected for")
        return self.frames[-1]

    def pop(self, kind: FrameKind):
        frame = self.peek(kind)
        self.frames.pop()
        self.arena.pop(frame.size)
        logger.debug(f"[STACK] pop {frame.kind.value} depth={len(self.frames)}")
        return frame

    def clear(self) -> None:
        self.frames.clear()
        self.arena.reset_stack()


@dataclass
class RuntimeState:
    """
    Execution context for one interpreter.

    Tracks:
    - The line currently executing (None in direct mode)
    - Running / halted flags
    - The control stack
    - Statements executed since the last submitted line
    """
    arena: Arena
    stack: ControlStack = None
    current_line: Optional[int] = None
    running: bool = False
    halted: bool = False
    steps: int = 0

    def __post_init__(self):
        if self.stack is None:
            self.stack = ControlStack(self.arena)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_line": self.current_line,
            "running": self.running,
            "halted": self.halted,
            "steps": self.steps,
            "stack_depth": len(self.stack),
            "arena": self.arena.to_dict(),
        }
