"""Creator dashboard aggregates."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.models import Video
from vidshare.db.services import like_service, subscription_service, video_service


@dataclass
class ChannelStats:
    total_videos: int
    total_views: int
    total_subscribers: int
    total_likes: int


async def get_channel_stats(db_session: AsyncSession, channel_id: UUID) -> ChannelStats:
    """Totals across every video the channel owns, published or not."""
    total_videos, total_views = await video_service.get_channel_video_totals(db_session, channel_id)
    total_subscribers = await subscription_service.count_subscribers(db_session, channel_id)
    total_likes = await like_service.count_channel_video_likes(db_session, channel_id)

    return ChannelStats(
        total_videos=total_videos,
        total_views=total_views,
        total_subscribers=total_subscribers,
        total_likes=total_likes,
    )


async def get_channel_videos(db_session: AsyncSession, channel_id: UUID) -> list[Video]:
    return await video_service.list_channel_videos(db_session, channel_id)
