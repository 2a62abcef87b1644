from litestar import Controller, Request, Response, get, post
from litestar.exceptions import NotFoundException
from litestar.status_codes import HTTP_200_OK, HTTP_201_CREATED
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.auth.guards import auth_guard
from vidshare.controllers.helpers import build_page_spec, require_user
from vidshare.db.services import like_service
from vidshare.db.services.like_service import LikeTarget
from vidshare.lib.identifiers import parse_id
from vidshare.lib.response import api_response
from vidshare.schemas import LikedVideo


class LikeController(Controller):
    path = "/likes"
    guards = [auth_guard]

    async def _toggle(self, request: Request, db_session: AsyncSession, target: LikeTarget, raw_id: str) -> Response:
        target_id = parse_id(raw_id, target)
        user = await require_user(request, db_session)
        label = target.capitalize()

        if not await like_service.target_exists(db_session, target, target_id):
            raise NotFoundException(f"{label} not found")

        liked = await like_service.toggle_like(db_session, user.id, target, target_id)
        if liked:
            return api_response({"liked": True}, f"{label} liked successfully", HTTP_201_CREATED)
        return api_response({"liked": False}, f"{label} unliked successfully", HTTP_200_OK)

    @post("/toggle/v/{video_id:str}")
    async def toggle_video_like(self, request: Request, db_session: AsyncSession, video_id: str) -> Response:
        return await self._toggle(request, db_session, "video", video_id)

    @post("/toggle/c/{comment_id:str}")
    async def toggle_comment_like(self, request: Request, db_session: AsyncSession, comment_id: str) -> Response:
        return await self._toggle(request, db_session, "comment", comment_id)

    @post("/toggle/t/{tweet_id:str}")
    async def toggle_tweet_like(self, request: Request, db_session: AsyncSession, tweet_id: str) -> Response:
        return await self._toggle(request, db_session, "tweet", tweet_id)

    @get("/videos")
    async def liked_videos(self, request: Request, db_session: AsyncSession, page: int = 1, limit: int = 10) -> Response:
        user = await require_user(request, db_session)
        page_spec = build_page_spec(page, limit)

        videos = await like_service.list_liked_videos(db_session, user.id, page_spec)
        return api_response(videos.map(LikedVideo.model_validate), "Liked videos fetched successfully")
