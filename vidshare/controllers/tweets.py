from litestar import Controller, Request, Response, delete, get, patch, post
from litestar.exceptions import NotFoundException
from litestar.status_codes import HTTP_201_CREATED
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.auth.guards import auth_guard
from vidshare.controllers.helpers import build_page_spec, ensure_owner, read_body, require_user, validate_payload
from vidshare.db.services import tweet_service, user_service
from vidshare.lib.identifiers import parse_id
from vidshare.lib.response import api_response
from vidshare.schemas import ContentIn, TweetOut, tweet_out


class TweetController(Controller):
    path = "/tweets"

    async def _get_owned_tweet(self, request: Request, db_session: AsyncSession, tweet_id: str, action: str):
        tweet_uuid = parse_id(tweet_id, "tweet")
        user = await require_user(request, db_session)

        tweet = await tweet_service.get_tweet_by_id(db_session, tweet_uuid)
        if not tweet:
            raise NotFoundException("Tweet not found")
        ensure_owner(tweet.owner_id, user, f"You are not allowed to {action} this tweet")
        return tweet

    @post("/", guards=[auth_guard])
    async def create_tweet(self, request: Request, db_session: AsyncSession) -> Response:
        user = await require_user(request, db_session)

        payload = validate_payload(ContentIn, await read_body(request), "Tweet content is required")
        tweet = await tweet_service.create_tweet(db_session, user.id, payload.content)
        return api_response(TweetOut.model_validate(tweet), "Tweet created successfully", HTTP_201_CREATED)

    @get("/user/{user_id:str}")
    async def user_tweets(self, db_session: AsyncSession, user_id: str, page: int = 1, limit: int = 10) -> Response:
        user_uuid = parse_id(user_id, "user")
        page_spec = build_page_spec(page, limit)

        if not await user_service.get_user_by_id(db_session, user_uuid):
            raise NotFoundException("User not found")

        tweets = await tweet_service.list_user_tweets(db_session, user_uuid, page_spec)
        return api_response(tweets.map(tweet_out), "Tweets fetched successfully")

    @patch("/{tweet_id:str}", guards=[auth_guard])
    async def update_tweet(self, request: Request, db_session: AsyncSession, tweet_id: str) -> Response:
        tweet = await self._get_owned_tweet(request, db_session, tweet_id, "update")

        payload = validate_payload(ContentIn, await read_body(request), "Updated content is required")
        tweet = await tweet_service.update_tweet(db_session, tweet, payload.content)
        return api_response(TweetOut.model_validate(tweet), "Tweet updated successfully")

    @delete("/{tweet_id:str}", guards=[auth_guard], status_code=200)
    async def delete_tweet(self, request: Request, db_session: AsyncSession, tweet_id: str) -> Response:
        tweet = await self._get_owned_tweet(request, db_session, tweet_id, "delete")

        await tweet_service.delete_tweet(db_session, tweet)
        return api_response(None, "Tweet deleted successfully")
