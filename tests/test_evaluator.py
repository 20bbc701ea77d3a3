"""Tests for the expression evaluator."""
import math
import pytest

from linebasic.errors import BasicSyntaxError, TypeMismatchError
from linebasic.runtime.state import Value, ValueType


class TestNumericExpressions:
    """Tests for numeric evaluation."""

    @pytest.mark.parametrize("expression,expected", [
        ("2+3*4", 14.0),
        ("(2+3)*4", 20.0),
        ("10-4-3", 3.0),
        ("8/2/2", 2.0),
        ("-3+5", 2.0),
        ("-(1+2)*2", -6.0),
        ("6 AND 3", 2.0),
        ("4 OR 1", 5.0),
        ("1E2+1", 101.0),
    ])
    def test_arithmetic(self, interpreter, expression, expected):
        """Test precedence and associativity."""
        assert interpreter.evaluate_numeric(expression) == expected

    @pytest.mark.parametrize("expression,expected", [
        ("ABS(-2.5)", 2.5),
        ("SQR(16)", 4.0),
        ("INT(3.7)", 3.0),
        ("INT(-3.7)", -3.0),
        ("SGN(-9)", -1.0),
        ("SGN(0)", 0.0),
        ("EXP(0)", 1.0),
        ("LOG(1)", 0.0),
        ("SIN(0)", 0.0),
        ("COS(0)", 1.0),
        ("ATN(0)", 0.0),
        ("NOT(0)", -1.0),
    ])
    def test_functions(self, interpreter, expression, expected):
        """Test built-in numeric functions."""
        assert interpreter.evaluate_numeric(expression) == pytest.approx(expected)

    def test_variables_in_expressions(self, interpreter):
        """Test variables read their current value."""
        interpreter.submit_line("A = 4")
        assert interpreter.evaluate_numeric("A*A+B") == 16.0

    def test_division_by_zero(self, interpreter):
        """Test division follows IEEE rules instead of raising."""
        assert interpreter.evaluate_numeric("1/0") == math.inf
        assert interpreter.evaluate_numeric("-1/0") == -math.inf
        assert math.isnan(interpreter.evaluate_numeric("0/0"))

    def test_domain_errors_give_nan(self, interpreter):
        """Test math domain errors give NaN."""
        assert math.isnan(interpreter.evaluate_numeric("SQR(-1)"))
        assert math.isnan(interpreter.evaluate_numeric("LOG(-1)"))
        assert interpreter.evaluate_numeric("LOG(0)") == -math.inf

    def test_trailing_tokens_rejected(self, interpreter):
        """Test the whole text must be one expression."""
        with pytest.raises(BasicSyntaxError):
            interpreter.evaluate_numeric("1 2")
        assert interpreter.last_error is not None

    def test_text_in_numeric_context(self, interpreter):
        """Test a string operand in arithmetic."""
        with pytest.raises(TypeMismatchError):
            interpreter.evaluate_numeric('1 + "A"')

    def test_missing_paren(self, interpreter):
        """Test an unclosed parenthesis."""
        with pytest.raises(BasicSyntaxError, match="Unexpected symbol"):
            interpreter.evaluate_numeric("(1+2")


class TestRandom:
    """Tests for RND."""

    def test_positive_argument_in_range(self, interpreter):
        """Test RND(1) is in [0, 1)."""
        for _ in range(20):
            assert 0.0 <= interpreter.evaluate_numeric("RND(1)") < 1.0

    def test_negative_argument_reseeds(self, interpreter):
        """Test RND with a negative argument is reproducible."""
        first = interpreter.evaluate_numeric("RND(-7)")
        interpreter.evaluate_numeric("RND(1)")
        assert interpreter.evaluate_numeric("RND(-7)") == first

    def test_zero_argument_is_clock_based(self, interpreter):
        """Test RND(0) is the current second scaled to [0, 1)."""
        assert 0.0 <= interpreter.evaluate_numeric("RND(0)") < 1.0


class TestTextExpressions:
    """Tests for text evaluation."""

    def test_string_literal(self, interpreter):
        """Test a literal evaluates to text."""
        result = interpreter.evaluate('"HELLO"')
        assert result.success
        assert result.value == Value.text("HELLO")

    def test_chr(self, interpreter):
        """Test CHR$ including the remapped box-drawing codes."""
        assert interpreter.evaluate("CHR$(65)").value.value == "A"
        assert interpreter.evaluate("CHR$(205)").value.value == "/"
        assert interpreter.evaluate("CHR$(206)").value.value == "\\"

    @pytest.mark.parametrize("expression,expected", [
        ('MID$("HELLO", 1, 3)', "ELL"),
        ('MID$("HELLO", 0, 2)', "HE"),
        ('MID$("HELLO", 3, 10)', "LO"),
    ])
    def test_mid(self, interpreter, expression, expected):
        """Test MID$ slicing."""
        assert interpreter.evaluate(expression).value.value == expected

    def test_string_variable(self, interpreter):
        """Test a text variable in an expression."""
        interpreter.submit_line('A$ = "WORLD"')
        result = interpreter.evaluate("MID$(A$, 1, 2)")
        assert result.value.value == "OR"

    def test_numeric_result_type(self, interpreter):
        """Test evaluate reports the value type."""
        result = interpreter.evaluate("1+1")
        assert result.value.value_type == ValueType.NUMERIC
        assert result.to_dict()["value_type"] == "NUMERIC"

    def test_error_in_result(self, interpreter):
        """Test evaluate reports errors rather than raising."""
        result = interpreter.evaluate("MID$(1, 2, 3)")
        assert not result.success
        assert result.error_kind == "TYPE_MISMATCH"
        assert interpreter.last_error == result.error


class TestConditions:
    """Tests for relational conditions."""

    @pytest.mark.parametrize("condition,expected", [
        ("1 < 2", "YES"),
        ("2 <= 2", "YES"),
        ("3 = 3", "YES"),
        ("3 >= 4", "NO"),
        ("5 > 4", "YES"),
        ('"ABC" < "ABD"', "YES"),
        ('"X" = "X"', "YES"),
    ])
    def test_relations(self, interpreter, output, condition, expected):
        """Test every relational operator on both value kinds."""
        interpreter.submit_line(f'R$ = "NO": IF {condition} THEN R$ = "YES"')
        interpreter.submit_line("PRINT R$")
        assert output.getvalue() == f"{expected}\n"

    def test_mixed_comparison(self, interpreter):
        """Test comparing a number with a string."""
        result = interpreter.submit_line('IF 1 = "A" THEN PRINT 1')
        assert not result.success
        assert result.error_kind == "TYPE_MISMATCH"
        assert "expected numeric" in result.errors[0]

    def test_missing_operator(self, interpreter):
        """Test a condition without a relational operator."""
        result = interpreter.submit_line("IF 1 THEN PRINT 1")
        assert not result.success
        assert "No valid relation operator found" in result.errors[0]
