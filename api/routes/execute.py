"""Run endpoint for program execution."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
import io
import time

from linebasic.runtime.executor import ExecutionConfig
from linebasic.runtime.interpreter import Interpreter

router = APIRouter()

# A request may not run forever on a worker.
DEFAULT_MAX_STEPS = 100_000


class RunRequest(BaseModel):
    """Request body for program execution."""
    program: str
    config: Optional[Dict[str, Any]] = None


class RunResponse(BaseModel):
    """Response body for program execution."""
    success: bool
    output: str = ""
    execution_time_ms: float
    steps: int = 0
    lines: int = 0
    errors: List[str] = []
    error_kind: Optional[str] = None
    error_line: Optional[int] = None


@router.post("/run", response_model=RunResponse)
async def run_program(request: RunRequest):
    """Load a program, RUN it and return everything it printed."""
    start_time = time.time()

    options = {"max_steps": DEFAULT_MAX_STEPS}
    options.update(request.config or {})
    options["abort_on_error"] = False
    try:
        config = ExecutionConfig.from_dict(options)
        output = io.StringIO()
        interpreter = Interpreter(config, output=output)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    results = interpreter.load(request.program)
    if all(r.success for r in results):
        results.append(interpreter.run())
    failed = next((r for r in results if not r.success), None)

    return RunResponse(
        success=failed is None,
        output=output.getvalue(),
        execution_time_ms=(time.time() - start_time) * 1000,
        steps=sum(r.steps for r in results),
        lines=len(interpreter.lines),
        errors=failed.errors if failed else [],
        error_kind=failed.error_kind if failed else None,
        error_line=failed.error_line if failed else None,
    )
