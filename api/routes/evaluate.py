"""Evaluate endpoint for standalone expressions."""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import Optional, Union
import math

from linebasic.runtime.interpreter import Interpreter

router = APIRouter()


class EvaluateRequest(BaseModel):
    """Request body for expression evaluation."""
    expression: str


class EvaluateResponse(BaseModel):
    """Response body for expression evaluation."""
    success: bool
    value: Optional[Union[float, str]] = None
    value_type: Optional[str] = None
    display: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate_expression(request: EvaluateRequest):
    """Evaluate a numeric or string expression."""
    interpreter = Interpreter()
    result = interpreter.evaluate(request.expression)
    data = result.to_dict()

    if result.value is not None:
        data["display"] = interpreter.executor.format_value(result.value)
        # JSON has no NaN or infinity; `display` still carries them.
        if isinstance(data["value"], float) and not math.isfinite(data["value"]):
            data["value"] = None

    return EvaluateResponse(**data)
