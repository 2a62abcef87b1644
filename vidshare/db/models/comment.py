from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidshare.db.base import Base

if TYPE_CHECKING:
    from vidshare.db.models.user import User


class Comment(Base):
    __tablename__ = "comments"

    content: Mapped[str] = mapped_column(Text, nullable=False)

    video_id: Mapped[UUID] = mapped_column(ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True)
    owner_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    owner: Mapped["User"] = relationship("User", lazy="joined")
