"""
linebasic Runtime Environment

The environment is everything the interpreter core reads and writes but does
not own the semantics of: variable bindings and stored program lines.

Key classes:
- VariableStore: Maps variable names to Values
- LineStore: Ordered line-number -> text container charged against the arena
"""

from __future__ import annotations

from bisect import bisect_right, insort
from typing import Callable, Dict, Any, Iterator, List, Optional, Tuple
import logging

from linebasic.errors import BasicSyntaxError, ResourceExhaustedError, TypeMismatchError
from linebasic.runtime.state import Arena, LINE_HEADER_SIZE, Value

logger = logging.getLogger(__name__)

MAX_LINE_NUMBER = 65535


class VariableStore:
    """
    Name -> Value bindings for scalar variables.

    Names are a single letter, with a trailing `$` for text variables. A
    binding is created on first assignment and lives until CLEAR.
    """

    def __init__(self):
        self.values: Dict[str, Value] = {}

    def get_numeric(self, name: str) -> float:
        value = self.values.get(name)
        if value is None:
            return 0.0
        return value.as_number()

    def set_numeric(self, name: str, number: float) -> None:
        if name.endswith("$"):
            raise TypeMismatchError(f"Cannot assign a number to {name}")
        self.values[name] = Value.numeric(number)

    def get_text(self, name: str) -> str:
        value = self.values.get(name)
        if value is None:
            return ""
        return value.as_text()

    def set_text(self, name: str, text: str) -> None:
        if not name.endswith("$"):
            raise TypeMismatchError(f"Cannot assign a string to {name}")
        self.values[name] = Value.text(text)

    def clear(self) -> None:
        self.values.clear()

    def snapshot(self) -> Dict[str, Any]:
        return {name: value.value for name, value in sorted(self.values.items())}


class LineStore:
    """
    Stored program lines, ordered by line number.

    Every line is charged `LINE_HEADER_SIZE + len(text) + 1` bytes of the
    arena's program region.
    """

    def __init__(self, arena: Arena):
        self.arena = arena
        self.lines: Dict[int, str] = {}
        self.numbers: List[int] = []

    def __len__(self) -> int:
        return len(self.lines)

    def __contains__(self, number: int) -> bool:
        return number in self.lines

    @staticmethod
    def _cost(text: str) -> int:
        return LINE_HEADER_SIZE + len(text.encode("utf-8")) + 1

    @staticmethod
    def check_number(number: float) -> int:
        """Validate a line number token and return it as an int."""
        if not 0 <= number <= MAX_LINE_NUMBER or number != int(number):
            raise BasicSyntaxError(f"Invalid line number {number:g}")
        return int(number)

    def first(self) -> Optional[int]:
        return self.numbers[0] if self.numbers else None

    def next(self, after: int) -> Optional[int]:
        """First stored line number strictly greater than `after`."""
        index = bisect_right(self.numbers, after)
        if index < len(self.numbers):
            return self.numbers[index]
        return None

    def get(self, number: int) -> Optional[str]:
        return self.lines.get(number)

    def store(self, number: int, text: str) -> None:
        old = self.lines.get(number)
        if old is not None:
            self.arena.release_program(self._cost(old))
        try:
            self.arena.reserve_program(self._cost(text))
        except ResourceExhaustedError:
            if old is not None:
                self.arena.reserve_program(self._cost(old))
            raise
        if old is None:
            insort(self.numbers, number)
        self.lines[number] = text
        logger.debug(f"[LINES] store {number}: {text!r}")

    def delete(self, number: int) -> None:
        text = self.lines.pop(number, None)
        if text is None:
            return
        self.numbers.remove(number)
        self.arena.release_program(self._cost(text))
        logger.debug(f"[LINES] delete {number}")

    def list(self, visit: Callable[[int, str], None]) -> None:
        for number in self.numbers:
            visit(number, self.lines[number])

    def items(self) -> Iterator[Tuple[int, str]]:
        for number in self.numbers:
            yield number, self.lines[number]
