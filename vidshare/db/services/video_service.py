"""Video service for CRUD operations and listing."""

from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.models import Comment, Like, Video
from vidshare.db.query import ListQuery, PageSpec, Paginated, SortSpec, paginate
from vidshare.lib.hooks import AFTER_VIDEO_DELETE, AFTER_VIDEO_PUBLISH, AFTER_VIDEO_UPDATE, hooks

# Public sort keys accepted by the listing endpoint
SORT_FIELDS = {
    "createdAt": Video.created_at,
    "views": Video.views,
    "duration": Video.duration,
    "title": Video.title,
}
DEFAULT_SORT = SortSpec("createdAt", "desc")


def published_filter():
    return Video.is_published == True  # noqa: E712


def visible_to(viewer_id: UUID | None):
    """Published videos, plus the viewer's own unpublished ones."""
    if viewer_id is None:
        return published_filter()
    return or_(published_filter(), Video.owner_id == viewer_id)


def build_video_list_query(
    sort: SortSpec = DEFAULT_SORT,
    search: str | None = None,
    owner_id: UUID | None = None,
) -> ListQuery[Video]:
    """Published videos matching an optional text search and owner."""
    query = ListQuery(Video).where(published_filter())

    if search:
        query = query.where(
            or_(Video.title.icontains(search, autoescape=True), Video.description.icontains(search, autoescape=True))
        )

    if owner_id is not None:
        query = query.where(Video.owner_id == owner_id)

    return query.order_by(*sort.clauses(SORT_FIELDS, tiebreaker=Video.id))


async def list_videos(
    db_session: AsyncSession,
    page: PageSpec,
    sort: SortSpec = DEFAULT_SORT,
    search: str | None = None,
    owner_id: UUID | None = None,
) -> Paginated[Video]:
    return await paginate(db_session, build_video_list_query(sort, search, owner_id), page)


async def get_video_by_id(db_session: AsyncSession, video_id: UUID) -> Video | None:
    result = await db_session.execute(select(Video).where(Video.id == video_id))
    return result.scalar_one_or_none()


async def record_view(db_session: AsyncSession, video_id: UUID) -> Video | None:
    """Increment the view counter in the database and return the fresh row.

    The increment is a single ``UPDATE ... SET views = views + 1`` so
    concurrent viewers never lose counts.
    """
    result = await db_session.execute(
        update(Video).where(Video.id == video_id).values(views=Video.views + 1)
    )
    if result.rowcount == 0:
        await db_session.rollback()
        return None
    await db_session.commit()

    fresh = await db_session.execute(
        select(Video).where(Video.id == video_id).execution_options(populate_existing=True)
    )
    return fresh.scalar_one_or_none()


async def insert_video(
    db_session: AsyncSession,
    owner_id: UUID,
    title: str,
    description: str,
    video_file: str,
    thumbnail: str,
    duration: float = 0.0,
    video_file_key: str | None = None,
    thumbnail_key: str | None = None,
    is_published: bool = True,
) -> Video:
    video = Video(
        owner_id=owner_id,
        title=title,
        description=description,
        video_file=video_file,
        video_file_key=video_file_key,
        thumbnail=thumbnail,
        thumbnail_key=thumbnail_key,
        duration=duration,
        views=0,
        is_published=is_published,
    )
    db_session.add(video)
    await db_session.commit()
    await db_session.refresh(video)
    return video


async def create_video(db_session: AsyncSession, owner_id: UUID, **fields) -> Video:
    """Insert a video, then run the publish hooks."""
    video = await insert_video(db_session, owner_id, **fields)
    await hooks.do_action(AFTER_VIDEO_PUBLISH, video)
    return video


async def save_video_changes(
    db_session: AsyncSession,
    video: Video,
    title: str | None = None,
    description: str | None = None,
    thumbnail: str | None = None,
    thumbnail_key: str | None = None,
) -> tuple[Video, str | None]:
    """Apply the provided fields to an already loaded video.

    Returns:
        The updated video and the storage key of a replaced thumbnail, if any,
        so the caller can remove the old object once the commit succeeded.
    """
    replaced_key = None

    if title is not None:
        video.title = title
    if description is not None:
        video.description = description
    if thumbnail is not None:
        replaced_key = video.thumbnail_key
        video.thumbnail = thumbnail
        video.thumbnail_key = thumbnail_key

    await db_session.commit()
    await db_session.refresh(video)
    return video, replaced_key


async def update_video(db_session: AsyncSession, video: Video, **changes) -> tuple[Video, str | None]:
    video, replaced_key = await save_video_changes(db_session, video, **changes)
    await hooks.do_action(AFTER_VIDEO_UPDATE, video)
    return video, replaced_key


async def delete_video(db_session: AsyncSession, video: Video) -> list[str]:
    """Delete a video with its comments and every like attached to either.

    Returns:
        Storage keys of the video's media objects, for removal after commit.
    """
    video_id = video.id
    media_keys = [key for key in (video.video_file_key, video.thumbnail_key) if key]

    comment_ids = select(Comment.id).where(Comment.video_id == video_id).scalar_subquery()
    await db_session.execute(delete(Like).where(Like.comment_id.in_(comment_ids)))
    await db_session.execute(delete(Like).where(Like.video_id == video_id))
    await db_session.execute(delete(Comment).where(Comment.video_id == video_id))
    await db_session.delete(video)
    await db_session.commit()

    await hooks.do_action(AFTER_VIDEO_DELETE, video_id)
    return media_keys


async def toggle_publish(db_session: AsyncSession, video: Video) -> Video:
    video.is_published = not video.is_published
    await db_session.commit()
    await db_session.refresh(video)

    await hooks.do_action(AFTER_VIDEO_UPDATE, video)
    return video


async def list_channel_videos(db_session: AsyncSession, owner_id: UUID) -> list[Video]:
    """Every video the owner uploaded, published or not, newest first."""
    result = await db_session.execute(
        select(Video).where(Video.owner_id == owner_id).order_by(Video.created_at.desc(), Video.id.desc())
    )
    return list(result.scalars().all())


async def get_channel_video_totals(db_session: AsyncSession, owner_id: UUID) -> tuple[int, int]:
    """Number of videos and their summed views for one owner."""
    result = await db_session.execute(
        select(func.count(Video.id), func.coalesce(func.sum(Video.views), 0)).where(Video.owner_id == owner_id)
    )
    count, views = result.one()
    return count or 0, int(views or 0)
