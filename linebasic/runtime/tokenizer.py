"""
linebasic Tokenizer

Token Source for the parser. Reads one token at a time from a text cursor and
owns no parsing state beyond that cursor, so the executor can reposition it
freely to implement jumps.

Key classes:
- TokenKind: Kind of a lexical token
- Token: A token with its payload
- Tokenizer: Cursor-based token source
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
import re


class TokenKind(Enum):
    NUMBER = "NUMBER"
    STRING = "STRING"
    VARIABLE_NUMBER = "VARIABLE_NUMBER"
    VARIABLE_STRING = "VARIABLE_STRING"

    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    EQUALS = "="
    LESS = "<"
    GREATER = ">"

    PRINT = "PRINT"
    IF = "IF"
    THEN = "THEN"
    GOTO = "GOTO"
    GOSUB = "GOSUB"
    RETURN = "RETURN"
    FOR = "FOR"
    TO = "TO"
    STEP = "STEP"
    NEXT = "NEXT"
    LET = "LET"
    LIST = "LIST"
    RUN = "RUN"
    END = "END"
    INPUT = "INPUT"
    CLEAR = "CLEAR"
    DIM = "DIM"

    AND = "AND"
    OR = "OR"

    FUNC_ABS = "ABS"
    FUNC_ATN = "ATN"
    FUNC_COS = "COS"
    FUNC_EXP = "EXP"
    FUNC_INT = "INT"
    FUNC_LOG = "LOG"
    FUNC_NOT = "NOT"
    FUNC_RND = "RND"
    FUNC_SGN = "SGN"
    FUNC_SIN = "SIN"
    FUNC_SQR = "SQR"
    FUNC_TAN = "TAN"

    FUNC_CHR = "CHR$"
    FUNC_MID = "MID$"

    EOF = "EOF"
    ERROR = "ERROR"


NUMERIC_FUNCTIONS = frozenset({
    TokenKind.FUNC_ABS, TokenKind.FUNC_ATN, TokenKind.FUNC_COS,
    TokenKind.FUNC_EXP, TokenKind.FUNC_INT, TokenKind.FUNC_LOG,
    TokenKind.FUNC_NOT, TokenKind.FUNC_RND, TokenKind.FUNC_SGN,
    TokenKind.FUNC_SIN, TokenKind.FUNC_SQR, TokenKind.FUNC_TAN,
})

_KEYWORDS = {
    kind.value: kind for kind in (
        TokenKind.PRINT, TokenKind.IF, TokenKind.THEN, TokenKind.GOTO,
        TokenKind.GOSUB, TokenKind.RETURN, TokenKind.FOR, TokenKind.TO,
        TokenKind.STEP, TokenKind.NEXT, TokenKind.LET, TokenKind.LIST,
        TokenKind.RUN, TokenKind.END, TokenKind.INPUT, TokenKind.CLEAR,
        TokenKind.DIM, TokenKind.AND, TokenKind.OR,
        TokenKind.FUNC_CHR, TokenKind.FUNC_MID,
    )
}
_KEYWORDS.update({kind.value: kind for kind in NUMERIC_FUNCTIONS})

_OPERATORS = {
    kind.value: kind for kind in TokenKind
    if len(kind.value) == 1 and not kind.value.isalnum()
}

# Longest first so the alternation prefers the longest keyword.
_KEYWORD_PATTERN = "|".join(
    re.escape(word) for word in sorted(_KEYWORDS, key=len, reverse=True)
)

_TOKEN_REGEX = re.compile(
    r"""
    (?P<SKIP>[ \t]+)
  | (?P<NUMBER>\d+(?:\.\d*)?(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)
  | (?P<STRING>"[^"\n]*")
  | (?P<KEYWORD>(?:%s))
  | (?P<VARIABLE>[A-Za-z]\$?)
  | (?P<OPERATOR>[-+*/(),;:=<>])
  | (?P<EOL>[\r\n])
  | (?P<ERROR>.)
    """ % _KEYWORD_PATTERN,
    re.VERBOSE | re.IGNORECASE,
)


@dataclass
class Token:
    """A lexical token. `value` holds the payload for literals and identifiers."""
    kind: TokenKind
    value: Any = None
    start: int = 0

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.kind.name})"
        return f"Token({self.kind.name}, {self.value!r})"


class Tokenizer:
    """
    Token source reading from a single line of text.

    `cursor` is the offset of the next character to read, i.e. just past the
    most recently returned token. The end of the text (or a newline) yields
    EOF, and keeps yielding EOF on further calls.
    """

    def __init__(self, text: str = ""):
        self.init(text)

    def init(self, text: str) -> None:
        """Start reading `text` from its first character."""
        self.text = text
        self._pos = 0
        self.token = Token(TokenKind.EOF)

    @property
    def cursor(self) -> int:
        return self._pos

    def set_cursor(self, offset: int) -> None:
        """Reposition the cursor within the current text."""
        if offset < 0 or offset > len(self.text):
            raise ValueError(f"Cursor {offset} outside text of length {len(self.text)}")
        self._pos = offset

    def next_token(self) -> Token:
        text = self.text
        while True:
            if self._pos >= len(text):
                self.token = Token(TokenKind.EOF, start=len(text))
                return self.token

            match = _TOKEN_REGEX.match(text, self._pos)
            group = match.lastgroup
            value = match.group()
            start = self._pos

            if group == "SKIP":
                self._pos = match.end()
                continue

            if group == "EOL":
                # Stay on the newline so every later call is EOF as well.
                self.token = Token(TokenKind.EOF, start=start)
                return self.token

            self._pos = match.end()
            self.token = self._make_token(group, value, start)
            return self.token

    def _make_token(self, group: str, value: str, start: int) -> Token:
        if group == "NUMBER":
            return Token(TokenKind.NUMBER, float(value), start)
        if group == "STRING":
            return Token(TokenKind.STRING, value[1:-1], start)
        if group == "KEYWORD":
            return Token(_KEYWORDS[value.upper()], None, start)
        if group == "VARIABLE":
            name = value.upper()
            if name.endswith("$"):
                return Token(TokenKind.VARIABLE_STRING, name, start)
            return Token(TokenKind.VARIABLE_NUMBER, name, start)
        if group == "OPERATOR":
            return Token(_OPERATORS[value], None, start)
        return Token(TokenKind.ERROR, value, start)

    def current_number(self) -> float:
        if self.token.kind != TokenKind.NUMBER:
            raise ValueError(f"Current token {self.token!r} is not a number")
        return self.token.value

    def current_text(self) -> str:
        if self.token.kind != TokenKind.STRING:
            raise ValueError(f"Current token {self.token!r} is not a string")
        return self.token.value

    def current_variable_name(self) -> str:
        if self.token.kind not in (TokenKind.VARIABLE_NUMBER, TokenKind.VARIABLE_STRING):
            raise ValueError(f"Current token {self.token!r} is not a variable")
        return self.token.value

    def tokens(self) -> list:
        """Tokenize the remaining text; handy for diagnostics."""
        result = []
        while True:
            token = self.next_token()
            if token.kind == TokenKind.EOF:
                return result
            result.append(token)
