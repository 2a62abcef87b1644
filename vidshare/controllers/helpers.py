"""Shared helpers for API controllers."""

from typing import Any, TypeVar
from uuid import UUID

from litestar import Request
from litestar.exceptions import (
    NotAuthorizedException,
    PermissionDeniedException,
    SerializationException,
    ValidationException,
)
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.models import User
from vidshare.db.query import PageSpec
from vidshare.db.services import user_service
from vidshare.lib.storage import StorageBackend

M = TypeVar("M", bound=BaseModel)


async def get_request_user(request: Request, db_session: AsyncSession) -> User | None:
    """The authenticated user, or None for anonymous requests."""
    user_id = request.scope.get("user")
    if not user_id:
        return None
    return await user_service.get_user_by_id(db_session, user_id)


async def require_user(request: Request, db_session: AsyncSession) -> User:
    user = await get_request_user(request, db_session)
    if user is None:
        raise NotAuthorizedException("Unauthorized request")
    return user


def build_page_spec(page: int, limit: int) -> PageSpec:
    try:
        return PageSpec(page=page, limit=limit)
    except ValueError as exc:
        raise ValidationException(str(exc)) from None


def ensure_owner(owner_id: UUID, user: User, message: str) -> None:
    if owner_id != user.id:
        raise PermissionDeniedException(message)


def validate_payload(model: type[M], data: Any, message: str = "Validation failed") -> M:
    """Validate a request body against ``model``, mapping failures to a 400."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        errors = [
            {"key": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        raise ValidationException(message, extra=errors) from None


def form_text(data: dict[str, Any], name: str) -> str | None:
    """Stripped text field from a multipart body; None if absent or not text."""
    value = data.get(name)
    if isinstance(value, str):
        return value.strip()
    return None


async def read_body(request: Request) -> dict[str, Any]:
    """Request body as a dict, from multipart/urlencoded forms or JSON."""
    content_type, _ = request.content_type
    if content_type in ("multipart/form-data", "application/x-www-form-urlencoded"):
        form = await request.form()
        return {key: form.get(key) for key in form.keys()}

    if not await request.body():
        return {}
    try:
        data = await request.json()
    except SerializationException:
        raise ValidationException("Malformed JSON body") from None
    if not isinstance(data, dict):
        raise ValidationException("Request body must be a JSON object")
    return data


async def get_storage(request: Request) -> StorageBackend:
    return await request.app.state.storage_manager.get()
