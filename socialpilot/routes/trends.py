"""
Trending topic routes.
"""
from fastapi import APIRouter, Depends

from ..auth import get_required_user
from ..models.user import User
from ..worker.trending import analyze_relevance, get_trending_topics, trending_hashtags

router = APIRouter(prefix="/api/trends", tags=["trends"])


@router.get("")
def get_trends(current_user: User = Depends(get_required_user)):
    """Trending topics for the current user's niche, ranked by relevance."""
    topics = get_trending_topics(current_user.niche, current_user.niche_keywords())
    ranked = analyze_relevance(topics, current_user.niche)
    for item in ranked:
        item["hashtags"] = trending_hashtags(item["topic"])
    return {"niche": current_user.niche or "general", "topics": ranked}
