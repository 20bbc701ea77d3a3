"""
linebasic Interpreter

Front-end surface of the interpreter core. Owns one runtime context (arena,
line store, variables, control stack) and decides, for every submitted line,
whether to store it as a program line or execute it immediately.

Key classes:
- Interpreter: Direct-mode dispatcher and front-end API
"""

from __future__ import annotations

from typing import Dict, Any, List, Optional, TextIO
import logging
import time

from linebasic.errors import BasicError
from linebasic.runtime.environment import LineStore, VariableStore
from linebasic.runtime.executor import ExecutionConfig, ExecutionResult, Executor
from linebasic.runtime.evaluator import EvaluatorResult
from linebasic.runtime.state import Arena, RuntimeState
from linebasic.runtime.tokenizer import TokenKind

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Interpreter for line-numbered BASIC programs.

    Lifecycle: created once with an ExecutionConfig that fixes the arena
    split; every RUN resets the control stack; discarded at exit.

    Errors surface as failed ExecutionResults and `last_error`. With
    `config.abort_on_error` the BasicError propagates to the caller instead.
    """

    def __init__(self, config: ExecutionConfig = None, output: TextIO = None):
        self.config = config or ExecutionConfig()
        self.arena = Arena(self.config.memory_size, self.config.stack_size)
        self.state = RuntimeState(self.arena)
        self.lines = LineStore(self.arena)
        self.variables = VariableStore()
        self.executor = Executor(self.lines, self.variables, self.state,
                                 self.config, output)
        self.last_error: Optional[str] = None

    @property
    def output(self) -> TextIO:
        return self.executor.output

    def submit_line(self, text: str) -> ExecutionResult:
        """
        Store, delete or execute one line of input.

        A leading line number stores the remainder as program text, or
        deletes that line when nothing follows the number. Anything else is
        executed immediately.
        """
        start = time.time()
        self.last_error = None
        self.state.steps = 0
        result = ExecutionResult(success=True)
        text = text.rstrip("\r\n")

        try:
            tokenizer = self.executor.tokenizer
            tokenizer.init(text)
            token = tokenizer.next_token()
            if token.kind == TokenKind.NUMBER:
                number = LineStore.check_number(tokenizer.current_number())
                body = text[tokenizer.cursor:].strip()
                if body:
                    self.lines.store(number, body)
                else:
                    self.lines.delete(number)
                result.stored_line = number
            elif token.kind != TokenKind.EOF:
                self.executor.execute_direct(text)
        except BasicError as e:
            logger.debug(f"[ERROR] {e.kind.value}: {e}")
            self.last_error = str(e)
            if self.config.abort_on_error:
                raise
            result.success = False
            result.errors.append(str(e))
            result.error_kind = e.kind.value
            result.error_line = e.line

        result.steps = self.state.steps
        result.execution_time_ms = (time.time() - start) * 1000
        return result

    def load(self, source: str) -> List[ExecutionResult]:
        """Submit every non-blank line of a program source."""
        results = []
        for line in source.splitlines():
            if not line.strip():
                continue
            result = self.submit_line(line)
            results.append(result)
            if not result.success:
                break
        return results

    def run(self) -> ExecutionResult:
        return self.submit_line("RUN")

    def evaluate_numeric(self, text: str) -> float:
        """
        Evaluate `text` as a single numeric expression.

        Raises BasicError when the text is not exactly one numeric expression.
        """
        self.last_error = None
        evaluator = self.executor.evaluator
        self.executor.tokenizer.init(text)
        evaluator.next_sym()
        try:
            number = evaluator.numeric_expression()
            evaluator.expect(TokenKind.EOF)
        except BasicError as e:
            self.last_error = str(e)
            raise
        return number

    def evaluate(self, text: str) -> EvaluatorResult:
        """Evaluate a numeric or text expression, reporting errors in the result."""
        result = self.executor.evaluator.evaluate(text)
        self.last_error = result.error
        return result

    def listing(self) -> List[str]:
        return [f"{number} {text}" for number, text in self.lines.items()]

    def snapshot(self) -> Dict[str, Any]:
        return {
            "lines": dict(self.lines.items()),
            "variables": self.variables.snapshot(),
            "state": self.state.to_dict(),
            "last_error": self.last_error,
        }
