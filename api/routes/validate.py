"""Validate endpoint for program sources."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Any, Dict, List, Optional

from linebasic.errors import BasicError
from linebasic.runtime.environment import LineStore
from linebasic.runtime.executor import ExecutionConfig
from linebasic.runtime.state import Arena
from linebasic.runtime.tokenizer import TokenKind, Tokenizer

router = APIRouter()


class ValidateRequest(BaseModel):
    """Request body for program validation."""
    program: str
    config: Optional[Dict[str, Any]] = None


class ValidateResponse(BaseModel):
    """Response body for program validation."""
    valid: bool
    line_count: int = 0
    program_bytes: int = 0
    errors: List[str] = []
    warnings: List[str] = []


def validate_program(program: str, config: ExecutionConfig) -> ValidateResponse:
    """
    Check a program source without running it.

    Every non-blank line must start with a valid line number, contain only
    characters the tokenizer knows, and fit into the program region.
    """
    errors: List[str] = []
    warnings: List[str] = []
    lines = LineStore(Arena(config.memory_size, config.stack_size))
    tokenizer = Tokenizer()

    for index, text in enumerate(program.splitlines(), start=1):
        if not text.strip():
            continue

        tokenizer.init(text)
        first = tokenizer.next_token()
        if first.kind != TokenKind.NUMBER:
            errors.append(f"Source line {index}: missing line number")
            continue

        try:
            number = LineStore.check_number(tokenizer.current_number())
        except BasicError as e:
            errors.append(f"Source line {index}: {e.message}")
            continue

        body_start = tokenizer.cursor
        for token in tokenizer.tokens():
            if token.kind == TokenKind.ERROR:
                errors.append(f"Line {number}: unexpected character {token.value!r}")
            elif token.kind in (TokenKind.INPUT, TokenKind.DIM):
                errors.append(f"Line {number}: {token.kind.value} is not supported")

        body = text[body_start:].strip()
        if not body:
            warnings.append(f"Line {number}: empty line deletes line {number}")
        if number in lines:
            warnings.append(f"Line {number}: replaces an earlier line {number}")

        try:
            if body:
                lines.store(number, body)
            else:
                lines.delete(number)
        except BasicError as e:
            errors.append(f"Line {number}: {e.message}")

    return ValidateResponse(
        valid=not errors,
        line_count=len(lines),
        program_bytes=lines.arena.program_end,
        errors=errors,
        warnings=warnings,
    )


@router.post("/validate", response_model=ValidateResponse)
async def validate_endpoint(request: ValidateRequest):
    """Validate a BASIC program source."""
    try:
        config = ExecutionConfig.from_dict(request.config or {})
        return validate_program(request.program, config)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))
