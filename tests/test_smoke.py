"""Smoke tests for linebasic modules."""
import pytest
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


class TestModuleImports:
    """Basic import tests for all modules."""

    def test_import_errors(self):
        """Test errors module imports."""
        from linebasic.errors import BasicError, ErrorKind
        assert BasicError is not None
        assert len(ErrorKind) == 6

    def test_import_runtime_tokenizer(self):
        """Test runtime.tokenizer module imports."""
        from linebasic.runtime.tokenizer import Tokenizer, TokenKind
        assert Tokenizer is not None
        assert TokenKind is not None

    def test_import_runtime_state(self):
        """Test runtime.state module imports."""
        from linebasic.runtime.state import RuntimeState, Arena, ControlStack
        assert RuntimeState is not None
        assert Arena is not None
        assert ControlStack is not None

    def test_import_runtime_environment(self):
        """Test runtime.environment module imports."""
        from linebasic.runtime.environment import LineStore, VariableStore
        assert LineStore is not None
        assert VariableStore is not None

    def test_import_runtime_evaluator(self):
        """Test runtime.evaluator module imports."""
        from linebasic.runtime.evaluator import ExpressionEvaluator
        assert ExpressionEvaluator is not None

    def test_import_runtime_executor(self):
        """Test runtime.executor module imports."""
        from linebasic.runtime.executor import Executor, ExecutionConfig
        assert Executor is not None
        assert ExecutionConfig is not None

    def test_import_runtime_interpreter(self):
        """Test runtime.interpreter module imports."""
        from linebasic.runtime.interpreter import Interpreter
        assert Interpreter is not None

    def test_import_cli(self):
        """Test CLI package imports."""
        from linebasic.cli import main
        assert main is not None


class TestPackageExports:
    """Tests for the top-level package surface."""

    def test_version(self):
        """Test the package exposes a version string."""
        import linebasic
        assert isinstance(linebasic.__version__, str)

    def test_top_level_names(self):
        """Test the front-end names are re-exported."""
        import linebasic
        for name in ("Interpreter", "ExecutionConfig", "ExecutionResult", "BasicError"):
            assert hasattr(linebasic, name)
