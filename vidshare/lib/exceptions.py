import logging

from litestar import Request, Response
from litestar.exceptions import HTTPException
from litestar.status_codes import HTTP_409_CONFLICT, HTTP_500_INTERNAL_SERVER_ERROR
from sqlalchemy.exc import IntegrityError

from vidshare.lib import observability
from vidshare.lib.response import error_body

logger = logging.getLogger(__name__)


def _normalize_errors(extra) -> list:
    """Validation details from Litestar arrive as a list, a dict, or nothing."""
    if not extra:
        return []
    if isinstance(extra, list):
        return extra
    return [extra]


def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Serialize any HTTPException (400/401/403/404/...) into the error envelope."""
    status_code = exc.status_code
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    return Response(
        content=error_body(status_code, detail, _normalize_errors(exc.extra)),
        status_code=status_code,
        media_type="application/json",
    )


def integrity_error_handler(request: Request, exc: IntegrityError) -> Response:
    """Uniqueness violations that a service did not resolve itself."""
    logger.info("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return Response(
        content=error_body(HTTP_409_CONFLICT, "Resource already exists"),
        status_code=HTTP_409_CONFLICT,
        media_type="application/json",
    )


def internal_server_error_handler(request: Request, exc: Exception) -> Response:
    """Log unexpected failures once and hide their details from clients."""
    method = request.method
    path = request.url.path
    if not observability.exception("Unhandled exception on {method} {path}", method=method, path=path):
        logger.exception("Unhandled exception on %s %s", method, path)

    return Response(
        content=error_body(HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"),
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        media_type="application/json",
    )
