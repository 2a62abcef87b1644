from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.models import Like, Tweet
from vidshare.db.query import ListQuery, PageSpec, Paginated, paginate
from vidshare.db.services import like_service


@dataclass
class TweetWithLikes:
    tweet: Tweet
    likes_count: int


def user_tweets_query(user_id: UUID) -> ListQuery[Tweet]:
    return ListQuery(Tweet).where(Tweet.owner_id == user_id).order_by(Tweet.created_at.desc(), Tweet.id.desc())


async def create_tweet(db_session: AsyncSession, owner_id: UUID, content: str) -> Tweet:
    tweet = Tweet(owner_id=owner_id, content=content)
    db_session.add(tweet)
    await db_session.commit()
    await db_session.refresh(tweet)
    return tweet


async def get_tweet_by_id(db_session: AsyncSession, tweet_id: UUID) -> Tweet | None:
    result = await db_session.execute(select(Tweet).where(Tweet.id == tweet_id))
    return result.scalar_one_or_none()


async def list_user_tweets(db_session: AsyncSession, user_id: UUID, page: PageSpec) -> Paginated[TweetWithLikes]:
    """A user's tweets, newest first, each paired with its like count."""
    tweets = await paginate(db_session, user_tweets_query(user_id), page)
    counts = await like_service.get_tweet_like_counts(db_session, [tweet.id for tweet in tweets.docs])
    return tweets.map(lambda tweet: TweetWithLikes(tweet=tweet, likes_count=counts.get(tweet.id, 0)))


async def update_tweet(db_session: AsyncSession, tweet: Tweet, content: str) -> Tweet:
    tweet.content = content
    await db_session.commit()
    await db_session.refresh(tweet)
    return tweet


async def delete_tweet(db_session: AsyncSession, tweet: Tweet) -> None:
    await db_session.execute(delete(Like).where(Like.tweet_id == tweet.id))
    await db_session.delete(tweet)
    await db_session.commit()
