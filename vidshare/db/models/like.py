from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from vidshare.db.base import Base

# A like targets exactly one of video / comment / tweet
_ONE_TARGET = (
    "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END"
    " + CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END"
    " + CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1"
)


class Like(Base):
    """Existence of a row means the user currently likes the target."""

    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("liked_by_id", "video_id", name="uq_likes_user_video"),
        UniqueConstraint("liked_by_id", "comment_id", name="uq_likes_user_comment"),
        UniqueConstraint("liked_by_id", "tweet_id", name="uq_likes_user_tweet"),
        CheckConstraint(_ONE_TARGET, name="ck_likes_single_target"),
    )

    liked_by_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    video_id: Mapped[UUID | None] = mapped_column(ForeignKey("videos.id", ondelete="CASCADE"), nullable=True, index=True)
    comment_id: Mapped[UUID | None] = mapped_column(ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    tweet_id: Mapped[UUID | None] = mapped_column(ForeignKey("tweets.id", ondelete="CASCADE"), nullable=True, index=True)
