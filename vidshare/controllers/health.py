from litestar import Controller, Response, get
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.lib.response import api_response


class HealthController(Controller):
    path = "/healthcheck"

    @get("/")
    async def healthcheck(self, db_session: AsyncSession) -> Response:
        await db_session.execute(text("SELECT 1"))
        return api_response({"status": "OK"}, "Health check passed")
