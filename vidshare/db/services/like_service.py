"""Like toggling for videos, comments and tweets."""

import logging
from typing import Literal
from uuid import UUID

from sqlalchemy import and_, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.models import Comment, Like, Tweet, Video
from vidshare.db.query import ListQuery, PageSpec, Paginated, paginate
from vidshare.db.services.video_service import visible_to
from vidshare.lib.hooks import AFTER_LIKE_TOGGLE, hooks

logger = logging.getLogger(__name__)

LikeTarget = Literal["video", "comment", "tweet"]

_TARGETS = {
    "video": (Video, Like.video_id),
    "comment": (Comment, Like.comment_id),
    "tweet": (Tweet, Like.tweet_id),
}


def _target(target: LikeTarget):
    try:
        return _TARGETS[target]
    except KeyError:
        raise ValueError(f"Unknown like target: {target}") from None


async def target_exists(db_session: AsyncSession, target: LikeTarget, target_id: UUID) -> bool:
    model, _ = _target(target)
    result = await db_session.execute(select(model.id).where(model.id == target_id))
    return result.first() is not None


async def has_user_liked(db_session: AsyncSession, user_id: UUID, target: LikeTarget, target_id: UUID) -> bool:
    _, column = _target(target)
    result = await db_session.execute(select(Like.id).where(and_(Like.liked_by_id == user_id, column == target_id)))
    return result.first() is not None


async def toggle_like(db_session: AsyncSession, user_id: UUID, target: LikeTarget, target_id: UUID) -> bool:
    """Toggle a like. Returns True if liked, False if unliked.

    The unique (user, target) constraints decide concurrent inserts: the
    losing insert is rolled back and reported as liked, which is the state
    the database ends up in.
    """
    _, column = _target(target)
    condition = and_(Like.liked_by_id == user_id, column == target_id)

    existing = await db_session.execute(select(Like.id).where(condition))

    if existing.first() is not None:
        await db_session.execute(delete(Like).where(condition))
        await db_session.commit()
        liked = False
    else:
        db_session.add(Like(liked_by_id=user_id, **{column.key: target_id}))
        try:
            await db_session.commit()
        except IntegrityError:
            await db_session.rollback()
            logger.info("Duplicate like on %s %s by %s ignored", target, target_id, user_id)
        liked = True

    await hooks.do_action(AFTER_LIKE_TOGGLE, user_id, target, target_id, liked)
    return liked


def liked_videos_query(user_id: UUID) -> ListQuery[Video]:
    """Videos the user liked that they may see (published, or their own), newest video first."""
    return (
        ListQuery(Video)
        .join(Like, Like.video_id == Video.id)
        .where(Like.liked_by_id == user_id, visible_to(user_id))
        .order_by(Video.created_at.desc(), Video.id.desc())
    )


async def list_liked_videos(db_session: AsyncSession, user_id: UUID, page: PageSpec) -> Paginated[Video]:
    return await paginate(db_session, liked_videos_query(user_id), page)


async def get_tweet_like_counts(db_session: AsyncSession, tweet_ids: list[UUID]) -> dict[UUID, int]:
    if not tweet_ids:
        return {}
    result = await db_session.execute(
        select(Like.tweet_id, func.count(Like.id)).where(Like.tweet_id.in_(tweet_ids)).group_by(Like.tweet_id)
    )
    return {tweet_id: count for tweet_id, count in result.all()}


async def count_channel_video_likes(db_session: AsyncSession, owner_id: UUID) -> int:
    """Likes received across every video the owner uploaded."""
    result = await db_session.execute(
        select(func.count(Like.id)).join(Video, Like.video_id == Video.id).where(Video.owner_id == owner_id)
    )
    return result.scalar() or 0
