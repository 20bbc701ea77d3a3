"""
linebasic - a direct-execution BASIC interpreter

Programs are parsed and run one statement at a time, straight from the stored
line text. There is no syntax tree and no bytecode.

Exports:
- Interpreter: Submit lines, run programs, evaluate expressions
- ExecutionConfig: Arena sizes and execution options
- BasicError: Base class of every interpreter error
"""

from linebasic.errors import (
    BasicError,
    BasicSyntaxError,
    ErrorKind,
    FrameMismatchError,
    ResourceExhaustedError,
    StackExhaustedError,
    TypeMismatchError,
    UndefinedLineError,
)
from linebasic.runtime import ExecutionConfig, ExecutionResult, Interpreter, Value, ValueType

__version__ = "0.3.0"

__all__ = [
    "Interpreter",
    "ExecutionConfig",
    "ExecutionResult",
    "Value",
    "ValueType",
    "BasicError",
    "BasicSyntaxError",
    "ErrorKind",
    "FrameMismatchError",
    "ResourceExhaustedError",
    "StackExhaustedError",
    "TypeMismatchError",
    "UndefinedLineError",
]
