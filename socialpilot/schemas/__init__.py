from .auth import UserCreate, UserLogin, UserResponse, TokenResponse, RefreshRequest
from .posts import PostUpdate
from .users import (
    NicheEntry,
    PreferencesUpdate,
    ProfileUpdate,
    OnboardingRequest,
    SocialConnectRequest,
    ProfilingAnswers,
)

__all__ = [
    "UserCreate", "UserLogin", "UserResponse", "TokenResponse", "RefreshRequest",
    "PostUpdate",
    "NicheEntry", "PreferencesUpdate", "ProfileUpdate", "OnboardingRequest",
    "SocialConnectRequest", "ProfilingAnswers",
]
