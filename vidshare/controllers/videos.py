from typing import Annotated

from litestar import Controller, Request, Response, delete, get, patch, post
from litestar.datastructures import UploadFile
from litestar.exceptions import NotFoundException, ValidationException
from litestar.params import Parameter
from litestar.status_codes import HTTP_201_CREATED
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.auth.guards import auth_guard
from vidshare.controllers.helpers import (
    build_page_spec,
    ensure_owner,
    form_text,
    get_storage,
    read_body,
    require_user,
)
from vidshare.db.query import SortSpec
from vidshare.db.services import video_service
from vidshare.lib.hooks import AFTER_VIDEO_PUBLISH, AFTER_VIDEO_UPDATE, hooks
from vidshare.lib.identifiers import parse_id, parse_optional_id
from vidshare.lib.response import api_response
from vidshare.lib.storage import discard, store_upload
from vidshare.schemas import VideoOut


def _parse_duration(value: str | None) -> float:
    if not value:
        return 0.0
    try:
        duration = float(value)
    except ValueError:
        raise ValidationException("Invalid duration") from None
    if duration < 0:
        raise ValidationException("Invalid duration")
    return duration


class VideoController(Controller):
    path = "/videos"

    async def _get_owned_video(self, request: Request, db_session: AsyncSession, video_id: str, action: str):
        video_uuid = parse_id(video_id, "video")
        user = await require_user(request, db_session)

        video = await video_service.get_video_by_id(db_session, video_uuid)
        if not video:
            raise NotFoundException("Video not found")
        ensure_owner(video.owner_id, user, f"You are not allowed to {action}")
        return video

    @get("/")
    async def list_videos(
        self,
        db_session: AsyncSession,
        page: int = 1,
        limit: int = 10,
        search: Annotated[str | None, Parameter(query="query")] = None,
        sort_by: Annotated[str, Parameter(query="sortBy")] = "createdAt",
        sort_type: Annotated[str, Parameter(query="sortType")] = "desc",
        user_id: Annotated[str | None, Parameter(query="userId")] = None,
    ) -> Response:
        page_spec = build_page_spec(page, limit)
        if sort_by not in video_service.SORT_FIELDS:
            raise ValidationException(f"Invalid sortBy field: {sort_by}")
        sort = SortSpec(sort_by, "asc" if sort_type == "asc" else "desc")
        owner_id = parse_optional_id(user_id, "user")

        videos = await video_service.list_videos(
            db_session, page_spec, sort=sort, search=(search or "").strip() or None, owner_id=owner_id
        )
        return api_response(videos.map(VideoOut.model_validate), "Videos fetched successfully")

    @post("/", guards=[auth_guard])
    async def publish(self, request: Request, db_session: AsyncSession) -> Response:
        user = await require_user(request, db_session)
        data = await read_body(request)

        title = form_text(data, "title")
        description = form_text(data, "description")
        if not title or not description:
            raise ValidationException("Title and description are required")

        video_file = data.get("videoFile")
        thumbnail = data.get("thumbnail")
        if not isinstance(video_file, UploadFile) or not isinstance(thumbnail, UploadFile):
            raise ValidationException("Video file and thumbnail are required")

        duration = _parse_duration(form_text(data, "duration"))

        storage = await get_storage(request)
        stored_video = await store_upload(storage, video_file, "videos")
        stored_thumbnail = None
        try:
            stored_thumbnail = await store_upload(storage, thumbnail, "thumbnails")
            video = await video_service.insert_video(
                db_session,
                owner_id=user.id,
                title=title,
                description=description,
                video_file=stored_video.url,
                video_file_key=stored_video.key,
                thumbnail=stored_thumbnail.url,
                thumbnail_key=stored_thumbnail.key,
                duration=duration,
            )
        except Exception:
            await discard(storage, stored_video.key, stored_thumbnail.key if stored_thumbnail else None)
            raise

        # Committed from here on: the stored media belongs to the row
        await hooks.do_action(AFTER_VIDEO_PUBLISH, video)
        return api_response(VideoOut.model_validate(video), "Video published successfully", HTTP_201_CREATED)

    @get("/{video_id:str}")
    async def get_video(self, db_session: AsyncSession, video_id: str) -> Response:
        video_uuid = parse_id(video_id, "video")

        video = await video_service.record_view(db_session, video_uuid)
        if not video:
            raise NotFoundException("Video not found")

        return api_response(VideoOut.model_validate(video), "Video fetched successfully")

    @patch("/{video_id:str}", guards=[auth_guard])
    async def update_video(self, request: Request, db_session: AsyncSession, video_id: str) -> Response:
        video = await self._get_owned_video(request, db_session, video_id, "update this video")
        data = await read_body(request)

        thumbnail = data.get("thumbnail")
        storage = await get_storage(request)
        stored_thumbnail = None
        if isinstance(thumbnail, UploadFile):
            stored_thumbnail = await store_upload(storage, thumbnail, "thumbnails")

        try:
            video, replaced_key = await video_service.save_video_changes(
                db_session,
                video,
                title=form_text(data, "title") or None,
                description=form_text(data, "description") or None,
                thumbnail=stored_thumbnail.url if stored_thumbnail else None,
                thumbnail_key=stored_thumbnail.key if stored_thumbnail else None,
            )
        except Exception:
            if stored_thumbnail:
                await discard(storage, stored_thumbnail.key)
            raise

        await discard(storage, replaced_key)
        await hooks.do_action(AFTER_VIDEO_UPDATE, video)
        return api_response(VideoOut.model_validate(video), "Video updated successfully")

    @delete("/{video_id:str}", guards=[auth_guard], status_code=200)
    async def delete_video(self, request: Request, db_session: AsyncSession, video_id: str) -> Response:
        video = await self._get_owned_video(request, db_session, video_id, "delete this video")

        media_keys = await video_service.delete_video(db_session, video)
        await discard(await get_storage(request), *media_keys)

        return api_response(None, "Video deleted successfully")

    @patch("/toggle/publish/{video_id:str}", guards=[auth_guard])
    async def toggle_publish(self, request: Request, db_session: AsyncSession, video_id: str) -> Response:
        video = await self._get_owned_video(request, db_session, video_id, "change publish status")

        video = await video_service.toggle_publish(db_session, video)
        return api_response({"isPublished": video.is_published}, "Publish status updated")
