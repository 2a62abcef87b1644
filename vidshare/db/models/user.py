from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidshare.db.base import Base

if TYPE_CHECKING:
    from vidshare.db.models.video import Video


class User(Base):
    """A viewer and, through their uploads, a channel.

    Subscriber and subscription counts are never stored here; they are
    computed from the subscriptions table when requested.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Media references (storage URLs)
    avatar: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    cover_image: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    videos: Mapped[list["Video"]] = relationship("Video", back_populates="owner")
