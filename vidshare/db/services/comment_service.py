from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.models import Comment, Like
from vidshare.db.query import ListQuery, PageSpec, Paginated, paginate
from vidshare.lib.hooks import AFTER_COMMENT_ADD, hooks


def video_comments_query(video_id: UUID) -> ListQuery[Comment]:
    return (
        ListQuery(Comment)
        .where(Comment.video_id == video_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )


async def list_video_comments(db_session: AsyncSession, video_id: UUID, page: PageSpec) -> Paginated[Comment]:
    """Comments on a video, newest first, each with its owner loaded."""
    return await paginate(db_session, video_comments_query(video_id), page)


async def get_comment_by_id(db_session: AsyncSession, comment_id: UUID) -> Comment | None:
    result = await db_session.execute(select(Comment).where(Comment.id == comment_id))
    return result.scalar_one_or_none()


async def create_comment(db_session: AsyncSession, video_id: UUID, owner_id: UUID, content: str) -> Comment:
    comment = Comment(video_id=video_id, owner_id=owner_id, content=content)
    db_session.add(comment)
    await db_session.commit()
    await db_session.refresh(comment)

    await hooks.do_action(AFTER_COMMENT_ADD, comment)
    return comment


async def update_comment(db_session: AsyncSession, comment: Comment, content: str) -> Comment:
    comment.content = content
    await db_session.commit()
    await db_session.refresh(comment)
    return comment


async def delete_comment(db_session: AsyncSession, comment: Comment) -> None:
    """Delete a comment and the likes pointing at it."""
    await db_session.execute(delete(Like).where(Like.comment_id == comment.id))
    await db_session.delete(comment)
    await db_session.commit()
