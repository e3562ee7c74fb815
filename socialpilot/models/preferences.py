"""
UserPreferences model for auto-posting and content preferences.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from ..database import Base


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    auto_posting_enabled = Column(Boolean, default=False, index=True)
    posting_frequency = Column(String(20), default="daily")  # daily, weekly, custom
    best_time_to_post = Column(String(5), default="09:00")  # HH:MM
    include_hashtags = Column(Boolean, default=True)
    include_trending_topics = Column(Boolean, default=True)
    max_hashtags = Column(Integer, default=10)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    user = relationship("User", back_populates="preferences")
