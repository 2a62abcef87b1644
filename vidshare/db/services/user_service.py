"""User lookups and the channel-profile aggregation."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.models import User
from vidshare.db.services import subscription_service


@dataclass
class ChannelProfile:
    user: User
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


async def get_user_by_id(db_session: AsyncSession, user_id: UUID) -> User | None:
    result = await db_session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(db_session: AsyncSession, username: str) -> User | None:
    result = await db_session.execute(select(User).where(User.username == username.strip().lower()))
    return result.scalar_one_or_none()


async def username_or_email_taken(db_session: AsyncSession, username: str, email: str) -> bool:
    result = await db_session.execute(
        select(User.id).where(or_(User.username == username.strip().lower(), User.email == email.strip().lower()))
    )
    return result.first() is not None


async def create_user(
    db_session: AsyncSession,
    username: str,
    email: str,
    password_hash: str,
    full_name: str = "",
    avatar: str | None = None,
    cover_image: str | None = None,
) -> User:
    """Create a user. Usernames and emails are stored lower-cased."""
    user = User(
        username=username.strip().lower(),
        email=email.strip().lower(),
        password_hash=password_hash,
        full_name=full_name,
        avatar=avatar,
        cover_image=cover_image,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


async def get_channel_profile(
    db_session: AsyncSession,
    username: str,
    viewer_id: UUID | None = None,
) -> ChannelProfile | None:
    """Channel page data: the user plus counts computed from subscriptions.

    Args:
        db_session: Database session
        username: Channel username (case-insensitive)
        viewer_id: Requesting user, used for ``is_subscribed``

    Returns:
        ChannelProfile or None if no such user
    """
    user = await get_user_by_username(db_session, username)
    if user is None:
        return None

    subscribers = await subscription_service.count_subscribers(db_session, user.id)
    subscribed_to = await subscription_service.count_subscriptions(db_session, user.id)
    is_subscribed = False
    if viewer_id is not None and viewer_id != user.id:
        is_subscribed = await subscription_service.is_subscribed(db_session, viewer_id, user.id)

    return ChannelProfile(
        user=user,
        subscribers_count=subscribers,
        channels_subscribed_to_count=subscribed_to,
        is_subscribed=is_subscribed,
    )
