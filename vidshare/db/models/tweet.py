from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidshare.db.base import Base

if TYPE_CHECKING:
    from vidshare.db.models.user import User


class Tweet(Base):
    """Short text post on a channel's community tab."""

    __tablename__ = "tweets"

    content: Mapped[str] = mapped_column(Text, nullable=False)

    owner_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    owner: Mapped["User"] = relationship("User", lazy="joined")
