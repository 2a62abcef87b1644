"""Access-token middleware.

Reads the token from the ``accessToken`` cookie (or an ``Authorization:
Bearer`` header) and stores the resolved user id in ``scope["user"]``. Missing
or invalid tokens leave ``scope["user"]`` as ``None``; whether that is allowed
is decided per handler by :func:`vidshare.auth.guards.auth_guard`.
"""

from litestar.connection import ASGIConnection
from litestar.types import ASGIApp, Receive, Scope, Send

from vidshare.auth.tokens import read_access_token


class TokenAuthMiddleware:
    """ASGI middleware resolving the requesting user id from an access token.

    Args:
        app: The ASGI application to wrap.
        secret_key: Secret the tokens were signed with.
        cookie_name: Cookie carrying the token.
    """

    def __init__(self, app: ASGIApp, secret_key: str, cookie_name: str = "accessToken") -> None:
        self.app = app
        self.secret_key = secret_key
        self.cookie_name = cookie_name

    def _extract_token(self, connection: ASGIConnection) -> str | None:
        token = connection.cookies.get(self.cookie_name)
        if token:
            return token

        scheme, _, credentials = connection.headers.get("authorization", "").partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
        return None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] in ("http", "websocket"):
            token = self._extract_token(ASGIConnection(scope, receive))
            scope["user"] = read_access_token(token, self.secret_key) if token else None
        await self.app(scope, receive, send)
