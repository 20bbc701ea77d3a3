"""
linebasic Statement Executor

Direct execution of statements off the token stream, plus the run loop that
walks stored lines in numeric order. Control flow (GOTO, GOSUB, RETURN, FOR,
NEXT, RUN) is implemented by relocating the tokenizer to a saved Position.

Key classes:
- ExecutionConfig: Configuration for execution
- ExecutionResult: Result of executing one submitted line
- Executor: Statement dispatcher and run loop
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Callable, Dict, Any, List, Optional, TextIO
import json
import logging
import random
import sys

from linebasic.errors import (
    BasicError,
    BasicSyntaxError,
    FrameMismatchError,
    ResourceExhaustedError,
    UndefinedLineError,
)
from linebasic.runtime.environment import LineStore, VariableStore
from linebasic.runtime.evaluator import ExpressionEvaluator
from linebasic.runtime.state import (
    CallFrame,
    FrameKind,
    LoopFrame,
    Position,
    RuntimeState,
    Value,
)
from linebasic.runtime.tokenizer import TokenKind, Tokenizer

logger = logging.getLogger(__name__)


@dataclass
class ExecutionConfig:
    """Configuration for the interpreter."""
    memory_size: int = 16384
    stack_size: int = 1024
    max_steps: int = 0
    abort_on_error: bool = False
    number_format: str = "%f"
    rnd_seed: Optional[int] = None

    def __post_init__(self):
        for name in ("memory_size", "stack_size", "max_steps"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if self.max_steps < 0:
            raise ValueError(f"max_steps must not be negative, got {self.max_steps}")
        if not isinstance(self.abort_on_error, bool):
            raise ValueError(f"abort_on_error must be a boolean, got {self.abort_on_error!r}")
        if self.rnd_seed is not None and (isinstance(self.rnd_seed, bool)
                                          or not isinstance(self.rnd_seed, int)):
            raise ValueError(f"rnd_seed must be an integer or null, got {self.rnd_seed!r}")
        if not isinstance(self.number_format, str):
            raise ValueError(f"number_format must be a string, got {self.number_format!r}")
        try:
            self.number_format % 1.0
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid number_format {self.number_format!r}: {e}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "memory_size": self.memory_size,
            "stack_size": self.stack_size,
            "max_steps": self.max_steps,
            "abort_on_error": self.abort_on_error,
            "number_format": self.number_format,
            "rnd_seed": self.rnd_seed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExecutionConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**data)


def load_config(path, **overrides) -> ExecutionConfig:
    """Load an ExecutionConfig from a JSON file; None-valued overrides are ignored."""
    data: Dict[str, Any] = {}
    if path:
        with open(Path(path)) as f:
            data = json.load(f)
    data.update({k: v for k, v in overrides.items() if v is not None})
    return ExecutionConfig.from_dict(data)


@dataclass
class ExecutionResult:
    """Result of executing one submitted line."""
    success: bool
    stored_line: Optional[int] = None
    errors: List[str] = field(default_factory=list)
    error_kind: Optional[str] = None
    error_line: Optional[int] = None
    steps: int = 0
    execution_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "stored_line": self.stored_line,
            "errors": self.errors,
            "error_kind": self.error_kind,
            "error_line": self.error_line,
            "steps": self.steps,
            "execution_time_ms": self.execution_time_ms,
        }


class Executor:
    """
    Statement executor and run loop.

    Statement grammar:

        line      = statement { ":" statement }
        statement = PRINT [expression] [";"]
                  | IF expression relop expression THEN (statement | number)
                  | GOTO number | GOSUB number | RETURN
                  | FOR numeric_variable "=" expr TO expr [STEP expr]
                  | NEXT [numeric_variable]
                  | [LET] variable "=" expression
                  | LIST | RUN [number] | END | CLEAR
    """

    def __init__(self,
                 lines: LineStore,
                 variables: VariableStore,
                 state: RuntimeState,
                 config: ExecutionConfig = None,
                 output: TextIO = None):
        self.lines = lines
        self.variables = variables
        self.state = state
        self.config = config or ExecutionConfig()
        self.output = output or sys.stdout
        self.tokenizer = Tokenizer()
        self.evaluator = ExpressionEvaluator(
            self.tokenizer, variables, random.Random(self.config.rnd_seed)
        )
        self.direct_text = ""
        self.handlers: Dict[TokenKind, Callable[[], None]] = {
            TokenKind.LIST: self.do_list,
            TokenKind.PRINT: self.do_print,
            TokenKind.GOTO: self.do_goto,
            TokenKind.GOSUB: self.do_gosub,
            TokenKind.RETURN: self.do_return,
            TokenKind.RUN: self.do_run,
            TokenKind.IF: self.do_if,
            TokenKind.FOR: self.do_for,
            TokenKind.NEXT: self.do_next,
            TokenKind.END: self.do_end,
            TokenKind.CLEAR: self.do_clear,
            TokenKind.LET: self.do_let,
        }

    @property
    def sym(self):
        return self.tokenizer.token

    def next_sym(self):
        return self.tokenizer.next_token()

    def write(self, text: str) -> None:
        self.output.write(text)

    def format_value(self, value: Value) -> str:
        if value.is_numeric():
            return self.config.number_format % value.value
        return value.value

    # Cursor relocation

    def _here(self) -> Position:
        return Position(self.state.current_line, self.tokenizer.cursor)

    def _enter(self, position: Position) -> None:
        """Point the tokenizer at `position` without reading a token."""
        if position.line is None:
            text = self.direct_text
        else:
            text = self.lines.get(position.line)
            if text is None:
                raise UndefinedLineError("Line not found.")
        if position.offset > len(text):
            raise UndefinedLineError("Line not found.")
        self.tokenizer.init(text)
        self.tokenizer.set_cursor(position.offset)
        self.state.current_line = position.line

    def _jump(self, position: Position) -> None:
        logger.debug(f"[TRACE] jump to line={position.line} offset={position.offset}")
        self._enter(position)
        self.next_sym()

    def _advance_line(self) -> bool:
        """
        Move to the next stored line after the current one.

        Returns False when execution of the current text is over: not running,
        back on the direct-mode line, or no later line exists.
        """
        if not self.state.running or self.state.current_line is None:
            return False
        following = self.lines.next(self.state.current_line)
        if following is None:
            self.state.running = False
            return False
        self._jump(Position(following, 0))
        return True

    def _goto(self, number: int) -> None:
        if number not in self.lines:
            raise UndefinedLineError("Line not found.")
        # GOTO from direct mode starts the program at that line.
        self.state.running = True
        self._jump(Position(number, 0))

    def _line_number(self) -> int:
        """Consume a literal line number token."""
        if self.sym.kind != TokenKind.NUMBER:
            raise BasicSyntaxError("Number expected")
        number = LineStore.check_number(self.tokenizer.current_number())
        self.next_sym()
        return number

    # Run loop

    def execute_direct(self, text: str) -> None:
        """Execute every statement of a direct-mode line."""
        self.direct_text = text
        self.state.current_line = None
        self.state.halted = False
        self.state.steps = 0
        self.tokenizer.init(text)
        self.next_sym()
        try:
            self._drive()
        except BasicError as e:
            if e.line is None:
                e.line = self.state.current_line
            raise
        finally:
            self.state.running = False
            # Frames may point into the direct-mode text, which is about to go away.
            self.state.stack.clear()

    def _drive(self) -> None:
        while not self.state.halted:
            kind = self.sym.kind
            if kind == TokenKind.EOF:
                if not self._advance_line():
                    return
                continue
            if kind == TokenKind.COLON:
                self.next_sym()
                continue
            self._count_step()
            self.statement()

    def _count_step(self) -> None:
        self.state.steps += 1
        if self.config.max_steps and self.state.steps > self.config.max_steps:
            raise ResourceExhaustedError(
                f"Step limit of {self.config.max_steps} statements exceeded"
            )

    def statement(self) -> None:
        kind = self.sym.kind
        handler = self.handlers.get(kind)
        if handler is None:
            if kind in (TokenKind.INPUT, TokenKind.DIM):
                raise BasicSyntaxError(f"{kind.value} is not supported")
            if kind == TokenKind.ERROR:
                raise BasicSyntaxError(f"Unexpected character {self.sym.value!r}")
            handler = self.assignment
        logger.debug(f"[TRACE] line={self.state.current_line} statement={kind.value}")
        handler()

    # Statements

    def do_list(self) -> None:
        self.next_sym()
        self.lines.list(lambda number, text: self.write(f"{number} {text}\n"))

    def do_print(self) -> None:
        self.next_sym()
        if self.sym.kind in (TokenKind.EOF, TokenKind.COLON):
            self.write("\n")
            return
        value = self.evaluator.expression()
        self.write(self.format_value(value))
        if not self.evaluator.accept(TokenKind.SEMICOLON):
            self.write("\n")

    def do_goto(self) -> None:
        self.next_sym()
        self._goto(self._line_number())

    def do_gosub(self) -> None:
        self.next_sym()
        number = self._line_number()
        if number not in self.lines:
            raise UndefinedLineError("Line not found.")
        self.state.stack.push(CallFrame(resume=self._here()))
        self._goto(number)

    def do_return(self) -> None:
        self.next_sym()
        frame = self.state.stack.pop(FrameKind.CALL)
        self._jump(frame.resume)

    def do_for(self) -> None:
        self.next_sym()
        if self.sym.kind != TokenKind.VARIABLE_NUMBER:
            raise BasicSyntaxError("Variable expected")
        name = self.tokenizer.current_variable_name()
        self.next_sym()
        self.evaluator.expect(TokenKind.EQUALS)
        value = self.evaluator.numeric_expression()
        self.variables.set_numeric(name, value)

        self.evaluator.expect(TokenKind.TO)
        end_value = self.evaluator.numeric_expression()

        step = 1.0
        if self.sym.kind not in (TokenKind.EOF, TokenKind.COLON):
            self.evaluator.expect(TokenKind.STEP)
            step = self.evaluator.numeric_expression()

        frame = LoopFrame(name, end_value, step, self._here())
        if frame.is_finished(value):
            logger.debug(f"[TRACE] FOR {name} skipped: {value} past {end_value}")
            self._skip_loop(name)
            return
        self.state.stack.push(frame)

    def _skip_loop(self, name: str) -> None:
        """Skip a loop body that runs zero times: continue after its NEXT."""
        depth = 0
        while True:
            kind = self.sym.kind
            if kind == TokenKind.EOF:
                if not self._advance_line():
                    return
                continue
            if kind == TokenKind.FOR:
                depth += 1
            elif kind == TokenKind.NEXT:
                if depth == 0:
                    self.next_sym()
                    if self.sym.kind == TokenKind.VARIABLE_NUMBER:
                        if self.tokenizer.current_variable_name() != name:
                            raise FrameMismatchError("Expected for with other var")
                        self.next_sym()
                    return
                depth -= 1
            self.next_sym()

    def do_next(self) -> None:
        self.next_sym()
        frame = self.state.stack.peek(FrameKind.LOOP)

        if self.sym.kind == TokenKind.VARIABLE_NUMBER:
            name = self.tokenizer.current_variable_name()
            self.next_sym()
            if name != frame.variable_name:
                raise FrameMismatchError("Expected for with other var")

        value = self.variables.get_numeric(frame.variable_name) + frame.step
        if frame.is_finished(value):
            self.state.stack.pop(FrameKind.LOOP)
            return

        self.variables.set_numeric(frame.variable_name, value)
        self._jump(frame.resume)

    def do_if(self) -> None:
        self.next_sym()
        result = self.evaluator.condition()
        if self.sym.kind != TokenKind.THEN:
            raise BasicSyntaxError("IF without THEN.")
        self.next_sym()

        if not result:
            while self.sym.kind != TokenKind.EOF:
                self.next_sym()
            return

        if self.sym.kind == TokenKind.NUMBER:
            self._goto(self._line_number())
        else:
            self.statement()

    def do_run(self) -> None:
        self.next_sym()
        start = None
        if self.sym.kind == TokenKind.NUMBER:
            start = self._line_number()
        self.run(start)

    def run(self, start: Optional[int] = None) -> None:
        """Reset the control stack and start the program at `start` or its first line."""
        self.state.stack.clear()
        if start is None:
            start = self.lines.first()
            if start is None:
                return
        logger.debug(f"[TRACE] RUN from line {start}")
        self._goto(start)

    def do_end(self) -> None:
        self.next_sym()
        self.state.running = False
        self.state.halted = True

    def do_clear(self) -> None:
        self.next_sym()
        self.variables.clear()
        self.state.stack.clear()

    def do_let(self) -> None:
        self.next_sym()
        self.assignment()

    def assignment(self) -> None:
        kind = self.sym.kind
        if kind not in (TokenKind.VARIABLE_NUMBER, TokenKind.VARIABLE_STRING):
            raise BasicSyntaxError("Expected a variable")
        name = self.tokenizer.current_variable_name()
        self.next_sym()
        self.evaluator.expect(TokenKind.EQUALS)

        if kind == TokenKind.VARIABLE_NUMBER:
            self.variables.set_numeric(name, self.evaluator.numeric_expression())
        else:
            value = self.evaluator.string_expression()
            if value is None:
                raise BasicSyntaxError("String expression expected")
            self.variables.set_text(name, value)
