"""
Post model for generated social media content.
"""
import enum

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from ..database import Base


class PostStatus(str, enum.Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    POSTED = "posted"
    FAILED = "failed"
    SCHEDULED = "scheduled"


def _empty_engagement():
    return {"likes": 0, "comments": 0, "shares": 0, "views": 0}


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_user_status", "user_id", "status"),
        Index("ix_posts_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Content
    caption = Column(Text, nullable=False)
    edited_caption = Column(Text, nullable=True)
    hashtags = Column(JSON, default=list)
    edited_hashtags = Column(JSON, nullable=True)
    approval_notes = Column(Text, nullable=True)

    # Provenance
    trending_topics = Column(JSON, default=list)
    ai_metadata = Column(JSON, default=dict)  # generationModel, trendingTopicsSources, confidenceScore, userNiche

    # Media
    image_path = Column(String(1000), nullable=True)
    image_url = Column(String(1000), nullable=True)

    status = Column(String(20), default=PostStatus.DRAFT.value, nullable=False)
    generated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    approved_at = Column(DateTime, nullable=True)
    posted_at = Column(DateTime, nullable=True)

    # Publish results
    social_media_ids = Column(JSON, default=dict)  # facebook, linkedin
    failure_reason = Column(Text, nullable=True)

    engagement = Column(JSON, default=_empty_engagement)  # likes, comments, shares, views
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    user = relationship("User", back_populates="posts")

    @property
    def display_caption(self) -> str:
        return self.edited_caption or self.caption

    @property
    def display_hashtags(self) -> list:
        if self.edited_hashtags is not None:
            return self.edited_hashtags
        return self.hashtags or []
