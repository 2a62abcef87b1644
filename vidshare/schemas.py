"""Response projections and request payloads.

Projections expose a restricted field subset of the ORM models and serialize
with camelCase keys. They are built with ``Model.model_validate(orm_obj)``.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# --- Projections ---


class OwnerSummary(CamelModel):
    id: UUID
    username: str
    full_name: str
    avatar: str | None = None


class VideoOut(CamelModel):
    id: UUID
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: datetime
    owner: OwnerSummary


class LikedVideo(CamelModel):
    id: UUID
    title: str
    thumbnail: str
    views: int
    duration: float
    created_at: datetime
    owner: OwnerSummary


class DashboardVideo(CamelModel):
    id: UUID
    title: str
    description: str
    thumbnail: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime


class CommentOut(CamelModel):
    id: UUID
    content: str
    video_id: UUID
    created_at: datetime
    updated_at: datetime
    owner: OwnerSummary


class TweetOut(CamelModel):
    id: UUID
    content: str
    created_at: datetime
    updated_at: datetime
    owner: OwnerSummary
    likes_count: int = 0


class SubscriptionEntry(OwnerSummary):
    """A user summary plus when the subscription was made."""

    subscribed_at: datetime


class ChannelStats(CamelModel):
    total_videos: int
    total_views: int
    total_subscribers: int
    total_likes: int


class ChannelProfile(OwnerSummary):
    email: str
    cover_image: str | None = None
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


# --- Payloads ---


class ContentIn(BaseModel):
    """Body of comment and tweet create/update requests."""

    content: NonBlankStr


def subscriber_entry(subscription) -> SubscriptionEntry:
    return SubscriptionEntry.model_validate(
        {**OwnerSummary.model_validate(subscription.subscriber).model_dump(), "subscribed_at": subscription.created_at}
    )


def channel_entry(subscription) -> SubscriptionEntry:
    return SubscriptionEntry.model_validate(
        {**OwnerSummary.model_validate(subscription.channel).model_dump(), "subscribed_at": subscription.created_at}
    )


def tweet_out(item) -> TweetOut:
    """Build a :class:`TweetOut` from a tweet paired with its like count."""
    out = TweetOut.model_validate(item.tweet)
    out.likes_count = item.likes_count
    return out


def channel_profile_out(profile) -> ChannelProfile:
    return ChannelProfile.model_validate(
        {
            **OwnerSummary.model_validate(profile.user).model_dump(),
            "email": profile.user.email,
            "cover_image": profile.user.cover_image,
            "subscribers_count": profile.subscribers_count,
            "channels_subscribed_to_count": profile.channels_subscribed_to_count,
            "is_subscribed": profile.is_subscribed,
        }
    )
