"""
Response envelope

Success: {"success": true, "data": ..., ...extra}
Failure: {"error": "<message>", "code": "<CODE>"}
"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from core.errors import LazyMintError


def success_response(
    data: Any = None,
    status_code: int = 200,
    message: Optional[str] = None,
    **extra: Any,
) -> JSONResponse:
    content = {"success": True}
    if message:
        content["message"] = message
    content["data"] = data
    content.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def error_response(exc: LazyMintError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
