import logging
from uuid import UUID

from sqlalchemy import and_, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.models import Subscription
from vidshare.db.query import ListQuery, PageSpec, Paginated, paginate
from vidshare.lib.hooks import AFTER_SUBSCRIPTION_TOGGLE, hooks

logger = logging.getLogger(__name__)


def _pair(subscriber_id: UUID, channel_id: UUID):
    return and_(Subscription.subscriber_id == subscriber_id, Subscription.channel_id == channel_id)


async def toggle_subscription(db_session: AsyncSession, subscriber_id: UUID, channel_id: UUID) -> bool:
    """Toggle a subscription. Returns True if now subscribed, False if unsubscribed."""
    if subscriber_id == channel_id:
        raise ValueError("A user cannot subscribe to their own channel")

    existing = await db_session.execute(select(Subscription.id).where(_pair(subscriber_id, channel_id)))

    if existing.first() is not None:
        await db_session.execute(delete(Subscription).where(_pair(subscriber_id, channel_id)))
        await db_session.commit()
        subscribed = False
    else:
        db_session.add(Subscription(subscriber_id=subscriber_id, channel_id=channel_id))
        try:
            await db_session.commit()
        except IntegrityError:
            # A concurrent toggle inserted the same pair first; the row exists either way
            await db_session.rollback()
            logger.info("Duplicate subscription %s -> %s ignored", subscriber_id, channel_id)
        subscribed = True

    await hooks.do_action(AFTER_SUBSCRIPTION_TOGGLE, subscriber_id, channel_id, subscribed)
    return subscribed


async def is_subscribed(db_session: AsyncSession, subscriber_id: UUID, channel_id: UUID) -> bool:
    result = await db_session.execute(select(Subscription.id).where(_pair(subscriber_id, channel_id)))
    return result.first() is not None


async def count_subscribers(db_session: AsyncSession, channel_id: UUID) -> int:
    result = await db_session.execute(
        select(func.count()).select_from(Subscription).where(Subscription.channel_id == channel_id)
    )
    return result.scalar() or 0


async def count_subscriptions(db_session: AsyncSession, subscriber_id: UUID) -> int:
    result = await db_session.execute(
        select(func.count()).select_from(Subscription).where(Subscription.subscriber_id == subscriber_id)
    )
    return result.scalar() or 0


def subscribers_query(channel_id: UUID) -> ListQuery[Subscription]:
    return (
        ListQuery(Subscription)
        .where(Subscription.channel_id == channel_id)
        .order_by(Subscription.created_at.desc(), Subscription.id.desc())
    )


def subscribed_channels_query(subscriber_id: UUID) -> ListQuery[Subscription]:
    return (
        ListQuery(Subscription)
        .where(Subscription.subscriber_id == subscriber_id)
        .order_by(Subscription.created_at.desc(), Subscription.id.desc())
    )


async def list_subscribers(db_session: AsyncSession, channel_id: UUID, page: PageSpec) -> Paginated[Subscription]:
    """Subscriptions *to* the channel, newest first; ``.subscriber`` is eager-loaded."""
    return await paginate(db_session, subscribers_query(channel_id), page)


async def list_subscribed_channels(
    db_session: AsyncSession, subscriber_id: UUID, page: PageSpec
) -> Paginated[Subscription]:
    """Subscriptions *by* the user, newest first; ``.channel`` is eager-loaded."""
    return await paginate(db_session, subscribed_channels_query(subscriber_id), page)
