"""Uniform JSON envelope for every API response.

Success: ``{"statusCode", "data", "message", "success": true}``
Failure: ``{"statusCode", "message", "success": false, "errors": [...]}``
"""

from typing import Any

from litestar import Response
from litestar.status_codes import HTTP_200_OK
from pydantic import BaseModel

from vidshare.db.query import Paginated


def to_json_data(data: Any) -> Any:
    """Dump pydantic projections (possibly nested in lists/pages) by alias."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, Paginated):
        return data.to_dict(to_json_data)
    if isinstance(data, (list, tuple)):
        return [to_json_data(item) for item in data]
    if isinstance(data, dict):
        return {key: to_json_data(value) for key, value in data.items()}
    return data


def success_body(data: Any, message: str, status_code: int = HTTP_200_OK) -> dict:
    return {
        "statusCode": status_code,
        "data": to_json_data(data),
        "message": message,
        "success": status_code < 400,
    }


def error_body(status_code: int, message: str, errors: list | None = None) -> dict:
    return {
        "statusCode": status_code,
        "message": message,
        "success": False,
        "errors": errors or [],
    }


def api_response(data: Any, message: str = "Success", status_code: int = HTTP_200_OK) -> Response:
    return Response(
        content=success_body(data, message, status_code),
        status_code=status_code,
        media_type="application/json",
    )
