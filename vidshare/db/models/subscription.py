from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidshare.db.base import Base


class Subscription(Base):
    """``subscriber`` follows ``channel``; both are users."""

    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_subscriber_channel"),
        CheckConstraint("subscriber_id <> channel_id", name="ck_subscriptions_not_self"),
    )

    subscriber_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    channel_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    subscriber: Mapped["User"] = relationship("User", foreign_keys=[subscriber_id], lazy="joined")
    channel: Mapped["User"] = relationship("User", foreign_keys=[channel_id], lazy="joined")
