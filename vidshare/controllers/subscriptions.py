from litestar import Controller, Request, Response, get, post
from litestar.exceptions import NotFoundException, ValidationException
from litestar.status_codes import HTTP_200_OK, HTTP_201_CREATED
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.auth.guards import auth_guard
from vidshare.controllers.helpers import build_page_spec, require_user
from vidshare.db.services import subscription_service, user_service
from vidshare.lib.identifiers import parse_id
from vidshare.lib.response import api_response
from vidshare.schemas import channel_entry, subscriber_entry


class SubscriptionController(Controller):
    path = "/subscriptions"

    @post("/c/{channel_id:str}", guards=[auth_guard])
    async def toggle_subscription(self, request: Request, db_session: AsyncSession, channel_id: str) -> Response:
        channel_uuid = parse_id(channel_id, "channel")
        if channel_uuid == request.scope.get("user"):
            raise ValidationException("You cannot subscribe to your own channel")

        subscriber = await require_user(request, db_session)
        if not await user_service.get_user_by_id(db_session, channel_uuid):
            raise NotFoundException("Channel not found")

        subscribed = await subscription_service.toggle_subscription(db_session, subscriber.id, channel_uuid)
        if subscribed:
            return api_response({"subscribed": True}, "Subscribed successfully", HTTP_201_CREATED)
        return api_response({"subscribed": False}, "Unsubscribed successfully", HTTP_200_OK)

    @get("/c/{channel_id:str}")
    async def channel_subscribers(
        self, db_session: AsyncSession, channel_id: str, page: int = 1, limit: int = 10
    ) -> Response:
        channel_uuid = parse_id(channel_id, "channel")
        page_spec = build_page_spec(page, limit)

        if not await user_service.get_user_by_id(db_session, channel_uuid):
            raise NotFoundException("Channel not found")

        subscribers = await subscription_service.list_subscribers(db_session, channel_uuid, page_spec)
        return api_response(subscribers.map(subscriber_entry), "Channel subscribers fetched successfully")

    @get("/u/{subscriber_id:str}")
    async def subscribed_channels(
        self, db_session: AsyncSession, subscriber_id: str, page: int = 1, limit: int = 10
    ) -> Response:
        subscriber_uuid = parse_id(subscriber_id, "subscriber")
        page_spec = build_page_spec(page, limit)

        if not await user_service.get_user_by_id(db_session, subscriber_uuid):
            raise NotFoundException("Subscriber not found")

        channels = await subscription_service.list_subscribed_channels(db_session, subscriber_uuid, page_spec)
        return api_response(channels.map(channel_entry), "Subscribed channels fetched successfully")
