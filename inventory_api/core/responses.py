"""Success envelope: {status, success, message, data}."""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success_response(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_code,
            "success": True,
            "message": message,
            "data": jsonable_encoder(data),
        },
    )


def created_response(message: str, data: Any = None) -> JSONResponse:
    return success_response(message, data, status_code=201)


def paginate(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": (total + limit - 1) // limit if limit else 0,
    }
