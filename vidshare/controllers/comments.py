from litestar import Controller, Request, Response, delete, get, patch, post
from litestar.exceptions import NotFoundException
from litestar.status_codes import HTTP_201_CREATED
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.auth.guards import auth_guard
from vidshare.controllers.helpers import build_page_spec, ensure_owner, read_body, require_user, validate_payload
from vidshare.db.services import comment_service, video_service
from vidshare.lib.identifiers import parse_id
from vidshare.lib.response import api_response
from vidshare.schemas import CommentOut, ContentIn


class CommentController(Controller):
    path = "/comments"

    async def _get_owned_comment(self, request: Request, db_session: AsyncSession, comment_id: str, action: str):
        comment_uuid = parse_id(comment_id, "comment")
        user = await require_user(request, db_session)

        comment = await comment_service.get_comment_by_id(db_session, comment_uuid)
        if not comment:
            raise NotFoundException("Comment not found")
        ensure_owner(comment.owner_id, user, f"You are not allowed to {action} this comment")
        return comment

    @get("/{video_id:str}")
    async def list_comments(self, db_session: AsyncSession, video_id: str, page: int = 1, limit: int = 10) -> Response:
        video_uuid = parse_id(video_id, "video")
        page_spec = build_page_spec(page, limit)

        if not await video_service.get_video_by_id(db_session, video_uuid):
            raise NotFoundException("Video not found")

        comments = await comment_service.list_video_comments(db_session, video_uuid, page_spec)
        return api_response(comments.map(CommentOut.model_validate), "Comments fetched successfully")

    @post("/{video_id:str}", guards=[auth_guard])
    async def add_comment(self, request: Request, db_session: AsyncSession, video_id: str) -> Response:
        video_uuid = parse_id(video_id, "video")
        user = await require_user(request, db_session)

        if not await video_service.get_video_by_id(db_session, video_uuid):
            raise NotFoundException("Video not found")

        payload = validate_payload(ContentIn, await read_body(request), "Comment content is required")
        comment = await comment_service.create_comment(db_session, video_uuid, user.id, payload.content)
        return api_response(CommentOut.model_validate(comment), "Comment added successfully", HTTP_201_CREATED)

    @patch("/c/{comment_id:str}", guards=[auth_guard])
    async def update_comment(self, request: Request, db_session: AsyncSession, comment_id: str) -> Response:
        comment = await self._get_owned_comment(request, db_session, comment_id, "update")

        payload = validate_payload(ContentIn, await read_body(request), "Updated content is required")
        comment = await comment_service.update_comment(db_session, comment, payload.content)
        return api_response(CommentOut.model_validate(comment), "Comment updated successfully")

    @delete("/c/{comment_id:str}", guards=[auth_guard], status_code=200)
    async def delete_comment(self, request: Request, db_session: AsyncSession, comment_id: str) -> Response:
        comment = await self._get_owned_comment(request, db_session, comment_id, "delete")

        await comment_service.delete_comment(db_session, comment)
        return api_response(None, "Comment deleted successfully")
