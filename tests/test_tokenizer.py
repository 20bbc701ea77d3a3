"""Tests for the tokenizer."""
import pytest

from linebasic.runtime.tokenizer import Tokenizer, TokenKind


def kinds(text):
    return [token.kind for token in Tokenizer(text).tokens()]


class TestTokenKinds:
    """Tests for classifying tokens."""

    def test_print_statement(self):
        """Test a simple PRINT statement."""
        assert kinds('PRINT "HI";') == [
            TokenKind.PRINT, TokenKind.STRING, TokenKind.SEMICOLON,
        ]

    def test_keywords_are_case_insensitive(self):
        """Test keywords match in any case."""
        assert kinds("print goto Gosub") == [
            TokenKind.PRINT, TokenKind.GOTO, TokenKind.GOSUB,
        ]

    def test_variables(self):
        """Test numeric and string variable names."""
        tokenizer = Tokenizer("a B$")
        first = tokenizer.next_token()
        assert first.kind == TokenKind.VARIABLE_NUMBER
        assert tokenizer.current_variable_name() == "A"
        second = tokenizer.next_token()
        assert second.kind == TokenKind.VARIABLE_STRING
        assert tokenizer.current_variable_name() == "B$"

    def test_functions(self):
        """Test numeric and text function names."""
        assert kinds("SQR(4) CHR$(65) MID$") == [
            TokenKind.FUNC_SQR, TokenKind.LEFT_PAREN, TokenKind.NUMBER,
            TokenKind.RIGHT_PAREN, TokenKind.FUNC_CHR, TokenKind.LEFT_PAREN,
            TokenKind.NUMBER, TokenKind.RIGHT_PAREN, TokenKind.FUNC_MID,
        ]

    def test_operators(self):
        """Test single-character operators."""
        assert kinds("+-*/(),;:=<>") == [
            TokenKind.PLUS, TokenKind.MINUS, TokenKind.MULTIPLY,
            TokenKind.DIVIDE, TokenKind.LEFT_PAREN, TokenKind.RIGHT_PAREN,
            TokenKind.COMMA, TokenKind.SEMICOLON, TokenKind.COLON,
            TokenKind.EQUALS, TokenKind.LESS, TokenKind.GREATER,
        ]

    def test_unknown_character(self):
        """Test an unknown character becomes an ERROR token."""
        tokens = Tokenizer("PRINT @").tokens()
        assert tokens[-1].kind == TokenKind.ERROR
        assert tokens[-1].value == "@"


class TestLiterals:
    """Tests for literal payloads."""

    @pytest.mark.parametrize("text,expected", [
        ("42", 42.0),
        ("3.5", 3.5),
        (".25", 0.25),
        ("1E3", 1000.0),
        ("2.5e-1", 0.25),
    ])
    def test_numbers(self, text, expected):
        """Test number literal forms."""
        tokenizer = Tokenizer(text)
        tokenizer.next_token()
        assert tokenizer.current_number() == expected

    def test_string_payload_strips_quotes(self):
        """Test string literals carry their text without quotes."""
        tokenizer = Tokenizer('"HELLO, WORLD"')
        tokenizer.next_token()
        assert tokenizer.current_text() == "HELLO, WORLD"

    def test_wrong_accessor_raises(self):
        """Test reading a payload of the wrong kind."""
        tokenizer = Tokenizer("PRINT")
        tokenizer.next_token()
        with pytest.raises(ValueError):
            tokenizer.current_number()


class TestCursor:
    """Tests for cursor handling."""

    def test_eof_repeats(self):
        """Test EOF is returned again after the end of text."""
        tokenizer = Tokenizer("A")
        tokenizer.next_token()
        assert tokenizer.next_token().kind == TokenKind.EOF
        assert tokenizer.next_token().kind == TokenKind.EOF

    def test_newline_is_end_of_line(self):
        """Test a newline ends the token stream."""
        assert kinds("A\nB") == [TokenKind.VARIABLE_NUMBER]

    def test_cursor_after_token(self):
        """Test the cursor sits just past the last token."""
        tokenizer = Tokenizer("10 PRINT")
        tokenizer.next_token()
        assert tokenizer.cursor == 2

    def test_set_cursor_rereads(self):
        """Test repositioning the cursor replays the text from there."""
        tokenizer = Tokenizer("GOTO 10")
        tokenizer.next_token()
        offset = tokenizer.cursor
        tokenizer.next_token()
        tokenizer.set_cursor(offset)
        assert tokenizer.next_token().kind == TokenKind.NUMBER

    def test_set_cursor_out_of_range(self):
        """Test a cursor outside the text is rejected."""
        tokenizer = Tokenizer("END")
        with pytest.raises(ValueError):
            tokenizer.set_cursor(10)
