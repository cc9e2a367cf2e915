"""Uniform response envelope applied to every API response."""
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    success: bool
    data: Any = None
    message: str
    errors: Any = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def success_response(data: Any = None, message: str = "Operation successful") -> ApiResponse:
    return ApiResponse(success=True, data=data, message=message)


def error_response(
    status_code: int,
    message: str,
    errors: Any = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Build a JSON error response wrapped in the envelope."""
    body = ApiResponse(success=False, message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)
