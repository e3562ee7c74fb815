from .user import User
from .post import Post, PostStatus
from .social_account import SocialAccount
from .preferences import UserPreferences
from .analytics import AnalyticsEvent

__all__ = [
    "User",
    "Post",
    "PostStatus",
    "SocialAccount",
    "UserPreferences",
    "AnalyticsEvent",
]
