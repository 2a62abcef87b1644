from litestar import Controller, Request, Response, get
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.auth.guards import auth_guard
from vidshare.controllers.helpers import require_user
from vidshare.db.services import dashboard_service
from vidshare.lib.response import api_response
from vidshare.schemas import ChannelStats, DashboardVideo


class DashboardController(Controller):
    """The requesting user's own channel."""

    path = "/dashboard"
    guards = [auth_guard]

    @get("/stats")
    async def stats(self, request: Request, db_session: AsyncSession) -> Response:
        user = await require_user(request, db_session)

        stats = await dashboard_service.get_channel_stats(db_session, user.id)
        return api_response(ChannelStats.model_validate(stats), "Channel stats fetched successfully")

    @get("/videos")
    async def videos(self, request: Request, db_session: AsyncSession) -> Response:
        user = await require_user(request, db_session)

        videos = await dashboard_service.get_channel_videos(db_session, user.id)
        return api_response(
            [DashboardVideo.model_validate(video) for video in videos],
            "Channel videos fetched successfully",
        )
