"""Test fixtures for the linebasic test suite."""
import io
import pytest
import sys
from pathlib import Path
from typing import Callable

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from linebasic.runtime.executor import ExecutionConfig
from linebasic.runtime.interpreter import Interpreter


@pytest.fixture
def output() -> io.StringIO:
    """Captured program output."""
    return io.StringIO()


@pytest.fixture
def interpreter(output) -> Interpreter:
    """Interpreter with default configuration writing into `output`."""
    return Interpreter(ExecutionConfig(rnd_seed=1), output=output)


@pytest.fixture
def run_program(output) -> Callable[..., str]:
    """
    Load and RUN a program source, returning what it printed.

    Errors propagate as BasicError since abort_on_error is set.
    """
    def _run(source: str, **options) -> str:
        options.setdefault("abort_on_error", True)
        interpreter = Interpreter(ExecutionConfig(**options), output=output)
        interpreter.load(source)
        interpreter.run()
        return output.getvalue()
    return _run


@pytest.fixture
def countdown_program() -> str:
    """Sample program using FOR with a negative STEP."""
    return "\n".join([
        "10 FOR I = 3 TO 1 STEP -1",
        "20 PRINT I",
        "30 NEXT I",
        "40 PRINT \"LIFTOFF\"",
    ])


@pytest.fixture
def subroutine_program() -> str:
    """Sample program calling a subroutine twice."""
    return "\n".join([
        "10 GOSUB 100",
        "20 GOSUB 100",
        "30 END",
        "100 PRINT \"SUB\"",
        "110 RETURN",
    ])
