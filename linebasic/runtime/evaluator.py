"""
linebasic Expression Evaluator

Recursive-descent evaluation straight off the token stream; no tree is built.

Grammar, tightest binding first:

    factor             = func "(" expression ")" | number | "(" expression ")" | variable
    term               = factor { ("*" | "/" | "AND") factor }
    numeric_expression = ["+" | "-"] term { ("+" | "-" | "OR") term }
    string_expression  = literal | string_variable | CHR$ "(" n ")" | MID$ "(" s "," from "," to ")"
    expression         = string_expression | numeric_expression

Key classes:
- EvaluatorResult: Result of evaluating a standalone expression
- ExpressionEvaluator: The recursive-descent evaluator
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Any, Optional
import logging
import math
import random
import time

from linebasic.errors import BasicError, BasicSyntaxError, TypeMismatchError
from linebasic.runtime.environment import VariableStore
from linebasic.runtime.state import Value, to_integer
from linebasic.runtime.tokenizer import NUMERIC_FUNCTIONS, Token, TokenKind, Tokenizer

logger = logging.getLogger(__name__)

RELATIONAL_OPERATORS = ("<", "<=", "=", ">=", ">")


@dataclass
class EvaluatorResult:
    """Result of evaluating a standalone expression."""
    success: bool
    value: Optional[Value] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "value": self.value.value if self.value is not None else None,
            "value_type": self.value.value_type.value if self.value is not None else None,
            "error": self.error,
            "error_kind": self.error_kind,
        }


def _ieee(func: Callable[[float], float]) -> Callable[[float], float]:
    """Wrap a math function so domain errors give NaN instead of raising."""
    def wrapper(n: float) -> float:
        try:
            return func(n)
        except ValueError:
            return math.nan
    wrapper.__name__ = func.__name__
    return wrapper


def _divide(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _sqr(n: float) -> float:
    if n < 0:
        return math.nan
    return math.sqrt(n)


def _log(n: float) -> float:
    if n == 0:
        return -math.inf
    if n < 0:
        return math.nan
    return math.log(n)


def _exp(n: float) -> float:
    try:
        return math.exp(n)
    except OverflowError:
        return math.inf


def _int(n: float) -> float:
    if math.isnan(n) or math.isinf(n):
        return n
    return float(int(n))


def _sgn(n: float) -> float:
    if n < 0:
        return -1.0
    elif n > 0:
        return 1.0
    else:
        return 0.0


def _not(n: float) -> float:
    return float(~to_integer(n))


def _chr(code: float) -> str:
    i = to_integer(code)
    if i == 205:
        return "/"
    if i == 206:
        return "\\"
    try:
        return chr(i)
    except (ValueError, OverflowError):
        raise TypeMismatchError(f"Illegal character code {i}")


class ExpressionEvaluator:
    """
    Evaluates expressions from the shared tokenizer.

    The current token (`sym`) is always the first token not yet consumed;
    every method leaves it on the first token after what it parsed.
    """

    def __init__(self, tokenizer: Tokenizer, variables: VariableStore,
                 rng: random.Random = None):
        self.tokenizer = tokenizer
        self.variables = variables
        self.rng = rng or random.Random()
        self.functions: Dict[TokenKind, Callable[[float], float]] = {
            TokenKind.FUNC_ABS: abs,
            TokenKind.FUNC_SIN: _ieee(math.sin),
            TokenKind.FUNC_COS: _ieee(math.cos),
            TokenKind.FUNC_TAN: _ieee(math.tan),
            TokenKind.FUNC_SQR: _sqr,
            TokenKind.FUNC_LOG: _log,
            TokenKind.FUNC_EXP: _exp,
            TokenKind.FUNC_ATN: math.atan,
            TokenKind.FUNC_INT: _int,
            TokenKind.FUNC_SGN: _sgn,
            TokenKind.FUNC_NOT: _not,
            TokenKind.FUNC_RND: self.rnd,
        }

    # Token plumbing

    @property
    def sym(self) -> Token:
        return self.tokenizer.token

    def next_sym(self) -> Token:
        return self.tokenizer.next_token()

    def accept(self, kind: TokenKind) -> bool:
        if self.sym.kind == kind:
            self.next_sym()
            return True
        return False

    def expect(self, kind: TokenKind) -> None:
        if not self.accept(kind):
            raise BasicSyntaxError(
                f"Unexpected symbol: expected {kind.value}, got {self._describe(self.sym)}"
            )

    @staticmethod
    def _describe(token: Token) -> str:
        if token.kind == TokenKind.EOF:
            return "end of line"
        if token.value is not None:
            return f"{token.value!r}"
        return token.kind.value

    # Built-ins

    def rnd(self, n: float) -> float:
        """
        RND(n):
        - n > 0: uniform float in [0, 1)
        - n = 0: current wall-clock second / 60
        - n < 0: reseed with int(n), then RND(1)
        """
        if n > 0:
            return self.rng.random()
        if n < 0:
            self.rng.seed(to_integer(n))
            return self.rnd(1)
        return time.localtime().tm_sec / 60

    # Numeric grammar

    def factor(self) -> float:
        sym = self.sym
        if sym.kind in NUMERIC_FUNCTIONS:
            func = self.functions[sym.kind]
            self.next_sym()
            self.expect(TokenKind.LEFT_PAREN)
            number = func(self.numeric_expression())
            self.expect(TokenKind.RIGHT_PAREN)
        elif sym.kind == TokenKind.NUMBER:
            number = self.tokenizer.current_number()
            self.next_sym()
        elif sym.kind == TokenKind.VARIABLE_NUMBER:
            number = self.variables.get_numeric(self.tokenizer.current_variable_name())
            self.next_sym()
        elif self.accept(TokenKind.LEFT_PAREN):
            number = self.numeric_expression()
            self.expect(TokenKind.RIGHT_PAREN)
        elif sym.kind in (TokenKind.STRING, TokenKind.VARIABLE_STRING,
                          TokenKind.FUNC_CHR, TokenKind.FUNC_MID):
            raise TypeMismatchError("Numeric expression expected")
        else:
            raise BasicSyntaxError(f"Syntax error at {self._describe(sym)}")
        return number

    def term(self) -> float:
        f1 = self.factor()
        while self.sym.kind in (TokenKind.MULTIPLY, TokenKind.DIVIDE, TokenKind.AND):
            operator = self.sym.kind
            self.next_sym()
            f2 = self.factor()
            if operator == TokenKind.MULTIPLY:
                f1 = f1 * f2
            elif operator == TokenKind.DIVIDE:
                f1 = _divide(f1, f2)
            else:
                f1 = float(to_integer(f1) & to_integer(f2))
        return f1

    def numeric_expression(self) -> float:
        operator = TokenKind.PLUS
        if self.sym.kind in (TokenKind.PLUS, TokenKind.MINUS):
            operator = self.sym.kind
            self.next_sym()
        t1 = self.term()
        if operator == TokenKind.MINUS:
            t1 = -t1
        while self.sym.kind in (TokenKind.PLUS, TokenKind.MINUS, TokenKind.OR):
            operator = self.sym.kind
            self.next_sym()
            t2 = self.term()
            if operator == TokenKind.PLUS:
                t1 = t1 + t2
            elif operator == TokenKind.MINUS:
                t1 = t1 - t2
            else:
                t1 = float(to_integer(t1) | to_integer(t2))
        return t1

    # Text grammar

    def string_expression(self) -> Optional[str]:
        """Parse a text expression, or return None without consuming anything."""
        sym = self.sym
        if sym.kind == TokenKind.STRING:
            string = self.tokenizer.current_text()
            self.next_sym()
            return string

        if sym.kind == TokenKind.VARIABLE_STRING:
            string = self.variables.get_text(self.tokenizer.current_variable_name())
            self.next_sym()
            return string

        if sym.kind == TokenKind.FUNC_CHR:
            self.next_sym()
            self.expect(TokenKind.LEFT_PAREN)
            string = _chr(self.numeric_expression())
            self.expect(TokenKind.RIGHT_PAREN)
            return string

        if sym.kind == TokenKind.FUNC_MID:
            self.next_sym()
            self.expect(TokenKind.LEFT_PAREN)
            source = self.string_expression()
            if source is None:
                raise TypeMismatchError("String expression expected")
            self.expect(TokenKind.COMMA)
            start = to_integer(self.numeric_expression())
            self.expect(TokenKind.COMMA)
            end = to_integer(self.numeric_expression())
            self.expect(TokenKind.RIGHT_PAREN)
            # No bounds checks and no optional length: out-of-range values
            # clamp, negative ones count from the end.
            return source[start:][:end]

        return None

    # Entry points

    def expression(self) -> Value:
        string = self.string_expression()
        if string is not None:
            return Value.text(string)
        return Value.numeric(self.numeric_expression())

    def relational_operator(self) -> str:
        if self.accept(TokenKind.LESS):
            if self.accept(TokenKind.EQUALS):
                return "<="
            return "<"
        if self.accept(TokenKind.EQUALS):
            return "="
        if self.accept(TokenKind.GREATER):
            if self.accept(TokenKind.EQUALS):
                return ">="
            return ">"
        raise BasicSyntaxError("No valid relation operator found")

    @staticmethod
    def compare(left: Value, right: Value, operator: str) -> bool:
        """Compare two values of the same kind with a relational operator."""
        if left.is_numeric():
            if not right.is_numeric():
                raise TypeMismatchError("Illegal right hand type, expected numeric.")
        elif not right.is_text():
            raise TypeMismatchError("Illegal right hand type, expected string.")

        if operator not in RELATIONAL_OPERATORS:
            raise BasicSyntaxError(f"Unknown relation operator {operator!r}")

        a, b = left.value, right.value
        if operator == "<":
            return a < b
        if operator == "<=":
            return a <= b
        if operator == "=":
            return a == b
        if operator == ">=":
            return a >= b
        return a > b

    def condition(self) -> bool:
        """expression relop expression"""
        left = self.expression()
        operator = self.relational_operator()
        right = self.expression()
        return self.compare(left, right, operator)

    def evaluate(self, source: str) -> EvaluatorResult:
        """
        Evaluate `source` as one complete expression.

        The whole text must be consumed; errors are reported in the result
        rather than raised.
        """
        self.tokenizer.init(source)
        self.next_sym()
        try:
            value = self.expression()
            self.expect(TokenKind.EOF)
        except BasicError as e:
            logger.debug(f"[EVAL] {source!r} failed: {e}")
            return EvaluatorResult(success=False, error=str(e), error_kind=e.kind.value)
        return EvaluatorResult(success=True, value=value)
