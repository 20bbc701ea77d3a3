"""Liveness and readiness probes for the interpreter service."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from linebasic import __version__
from linebasic.errors import BasicError
from linebasic.runtime.executor import ExecutionConfig
from linebasic.runtime.interpreter import Interpreter

logger = logging.getLogger(__name__)

router = APIRouter()

# Smallest program exercising storage, the run loop and a call frame.
READINESS_PROGRAM = "10 GOSUB 20: END\n20 A = 1 + 1: RETURN"


def check_interpreter() -> dict:
    """Build a default interpreter and run a tiny program through it."""
    checks = {"config": False, "interpreter": False, "program": False}
    try:
        config = ExecutionConfig(max_steps=100)
        checks["config"] = True
        interpreter = Interpreter(config)
        checks["interpreter"] = True
        interpreter.load(READINESS_PROGRAM)
        result = interpreter.run()
        checks["program"] = result.success and interpreter.variables.get_numeric("A") == 2.0
    except (BasicError, ValueError) as e:
        logger.warning(f"Readiness check failed: {e}")
    return checks


@router.get("/health")
async def health_check():
    """Report that the service process is up."""
    return {
        "status": "healthy",
        "version": __version__,
        "service": "linebasic-api",
    }


@router.get("/health/ready")
async def readiness_check():
    """Report whether a default interpreter can run a program; 503 otherwise."""
    checks = check_interpreter()
    ready = all(checks.values())
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"ready": ready, "checks": checks},
    )
