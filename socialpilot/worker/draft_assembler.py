"""
Draft Assembler

Turns a user's profile into a persisted draft post:

1. trending topics from the user's niche and niche keywords
2. an AI caption built from those topics, the profile and past engagement
3. an image from the pool (optional, a missing image is not an error)
4. a Post in ``draft`` status plus a ``post_generated`` analytics event

Nothing is written unless every required step succeeds.
"""

from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import GenerationError, PersistenceError
from ..logging_config import db_logger, pipeline_logger, timed
from ..models.post import Post, PostStatus
from ..models.user import User
from .analytics import record_event
from .caption_generator import CaptionGenerator, CaptionRequest
from .image_selector import ImageStore
from .trending import get_trending_topics

TrendSource = Callable[[Optional[str], List[str]], List[str]]


class DraftAssembler:
    """Compose trend lookup, caption generation and image selection into a draft"""

    def __init__(
        self,
        caption_generator: CaptionGenerator,
        image_store: ImageStore,
        trend_source: TrendSource = get_trending_topics,
    ):
        self.caption_generator = caption_generator
        self.image_store = image_store
        self.trend_source = trend_source

    def _trending_topics(self, user: User) -> List[str]:
        try:
            return self.trend_source(user.niche, user.niche_keywords())
        except Exception as e:
            raise GenerationError(f"Failed to fetch trending topics: {e}") from e

    def _select_image(self, caption: str, hashtags: List[str]):
        try:
            return self.image_store.select_image_for_caption(caption, hashtags)
        except OSError as e:
            pipeline_logger.warning("Image selection failed, continuing without image", error_message=str(e))
            return None

    @timed(pipeline_logger)
    def generate_draft(self, db: Session, user: User) -> Post:
        """
        Generate and persist a draft post for ``user``.

        Raises:
            GenerationError: trend lookup or caption generation failed.
            PersistenceError: the draft could not be saved.
        """
        prefs = user.preferences
        include_topics = prefs.include_trending_topics if prefs else True
        include_hashtags = prefs.include_hashtags if prefs else True
        max_hashtags = prefs.max_hashtags if prefs and prefs.max_hashtags is not None else 10

        topics = self._trending_topics(user)

        generated = self.caption_generator.generate(CaptionRequest(
            niche=user.niche,
            style=user.posting_style,
            target_audience=user.target_audience,
            trending_topics=topics if include_topics else [],
            past_engagement=user.past_posts or [],
        ))

        hashtags = generated.hashtags[:max_hashtags] if include_hashtags else []
        image = self._select_image(generated.caption, hashtags)

        post = Post(
            user_id=user.id,
            caption=generated.caption,
            hashtags=hashtags,
            trending_topics=generated.trending_topics,
            image_path=image.path if image else None,
            image_url=image.url if image else None,
            status=PostStatus.DRAFT.value,
            ai_metadata={
                "generationModel": self.caption_generator.model,
                "trendingTopicsSources": topics,
                "confidenceScore": generated.confidence_score,
                "userNiche": user.niche,
            },
        )

        try:
            db.add(post)
            db.flush()
            record_event(db, user.id, "post_generated", {
                "caption": post.caption,
                "hashtags": post.hashtags,
                "trendingTopics": post.trending_topics,
            }, post_id=post.id)
            db.commit()
        except SQLAlchemyError as e:
            db_logger.error("Failed to save draft", error=e, user_id=user.id)
            db.rollback()
            raise PersistenceError(f"Failed to save draft: {e}") from e

        db.refresh(post)
        pipeline_logger.info("Draft generated", user_id=user.id, post_id=post.id, has_image=bool(image))
        return post
