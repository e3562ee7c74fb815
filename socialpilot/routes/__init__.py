from .auth import router as auth_router
from .users import router as users_router
from .posts import router as posts_router
from .images import router as images_router
from .trends import router as trends_router

__all__ = [
    "auth_router",
    "users_router",
    "posts_router",
    "images_router",
    "trends_router",
]
