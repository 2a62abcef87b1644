from litestar import Controller, Request, Response, get
from litestar.exceptions import NotFoundException, ValidationException
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.db.services import user_service
from vidshare.lib.response import api_response
from vidshare.schemas import channel_profile_out


class UserController(Controller):
    path = "/users"

    @get("/c/{username:str}")
    async def channel_profile(self, request: Request, db_session: AsyncSession, username: str) -> Response:
        """Public channel page; ``isSubscribed`` reflects the requester when signed in."""
        if not username.strip():
            raise ValidationException("Username is missing")

        profile = await user_service.get_channel_profile(db_session, username, request.scope.get("user"))
        if not profile:
            raise NotFoundException("Channel does not exist")

        return api_response(channel_profile_out(profile), "User channel fetched successfully")
