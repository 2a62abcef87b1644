from vidshare.db.models.comment import Comment
from vidshare.db.models.like import Like
from vidshare.db.models.subscription import Subscription
from vidshare.db.models.tweet import Tweet
from vidshare.db.models.user import User
from vidshare.db.models.video import Video

__all__ = ["Comment", "Like", "Subscription", "Tweet", "User", "Video"]
