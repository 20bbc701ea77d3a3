"""
linebasic Runtime Engine

This package provides the interpreter core:
- Tokenizer: Cursor-based token source
- ExpressionEvaluator: Recursive-descent expression evaluation
- Executor: Statement dispatch and the run loop
- Interpreter: Direct-mode dispatcher and front-end surface
- State: Value model, control-flow frames, arena and runtime context
- Environment: Variable store and line store
"""

from linebasic.runtime.executor import Executor, ExecutionResult, ExecutionConfig, load_config
from linebasic.runtime.evaluator import ExpressionEvaluator, EvaluatorResult
from linebasic.runtime.interpreter import Interpreter
from linebasic.runtime.state import (
    Arena,
    CallFrame,
    ControlStack,
    LoopFrame,
    Position,
    RuntimeState,
    Value,
    ValueType,
)
from linebasic.runtime.environment import LineStore, VariableStore
from linebasic.runtime.tokenizer import Token, TokenKind, Tokenizer

__all__ = [
    "Executor",
    "ExecutionResult",
    "ExecutionConfig",
    "load_config",
    "ExpressionEvaluator",
    "EvaluatorResult",
    "Interpreter",
    "Arena",
    "CallFrame",
    "ControlStack",
    "LoopFrame",
    "Position",
    "RuntimeState",
    "Value",
    "ValueType",
    "LineStore",
    "VariableStore",
    "Token",
    "TokenKind",
    "Tokenizer",
]
