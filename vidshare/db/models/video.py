from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidshare.db.base import Base

if TYPE_CHECKING:
    from vidshare.db.models.user import User


class Video(Base):
    __tablename__ = "videos"

    owner_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    owner: Mapped["User"] = relationship("User", back_populates="videos", lazy="joined")

    # Media: public URL plus the storage key needed to remove the object later
    video_file: Mapped[str] = mapped_column(String(1024), nullable=False)
    video_file_key: Mapped[str | None] = mapped_column(String(512), nullable=True)
    thumbnail: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    thumbnail_key: Mapped[str | None] = mapped_column(String(512), nullable=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
