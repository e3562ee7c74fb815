"""
User model for authentication, profile and generation context.
"""
from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from ..database import Base
from .social_account import SUPPORTED_PLATFORMS


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True)

    # Profile
    niche = Column(String(100), nullable=True)
    niches = Column(JSON, default=list)  # [{name, description, keywords}]
    target_audience = Column(String(255), nullable=True)
    posting_style = Column(String(20), default="professional")
    past_posts = Column(JSON, default=list)  # [{caption, likes, comments, shares, postedAt}]
    profile_completeness = Column(Integer, default=0)
    is_onboarded = Column(Boolean, default=False)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    posts = relationship("Post", back_populates="user", cascade="all, delete-orphan")
    social_accounts = relationship("SocialAccount", back_populates="user", cascade="all, delete-orphan")
    preferences = relationship("UserPreferences", back_populates="user", uselist=False, cascade="all, delete-orphan")
    analytics_events = relationship("AnalyticsEvent", back_populates="user", cascade="all, delete-orphan")

    def niche_keywords(self) -> list:
        """Keywords from every configured niche, in declaration order."""
        keywords = []
        for entry in self.niches or []:
            keywords.extend(entry.get("keywords") or [])
        return keywords

    def social_account(self, platform: str):
        for account in self.social_accounts:
            if account.platform == platform:
                return account
        return None

    def calculate_profile_completeness(self) -> int:
        """Percentage of the six profile checkpoints that are filled in."""
        checks = [
            bool(self.name),
            bool(self.niche),
            bool(self.target_audience),
            bool(self.posting_style),
        ]
        for platform in SUPPORTED_PLATFORMS:
            account = self.social_account(platform)
            checks.append(bool(account and account.connected))
        return round(sum(checks) / len(checks) * 100)
