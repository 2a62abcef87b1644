from litestar.connection import ASGIConnection
from litestar.exceptions import NotAuthorizedException
from litestar.handlers.base import BaseRouteHandler


def auth_guard(connection: ASGIConnection, _: BaseRouteHandler) -> None:
    """Reject requests without a valid access token."""
    if connection.scope.get("user") is None:
        raise NotAuthorizedException("Unauthorized request")
