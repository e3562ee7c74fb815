from pydantic import BaseModel, Field
from typing import Literal, Optional, List

PostingStyle = Literal["professional", "casual", "humorous", "inspirational", "educational"]
PostingFrequency = Literal["daily", "weekly", "custom"]


class NicheEntry(BaseModel):
    name: str
    description: Optional[str] = None
    keywords: List[str] = []


class PreferencesUpdate(BaseModel):
    auto_posting_enabled: Optional[bool] = Field(default=None, alias="autoPostingEnabled")
    posting_frequency: Optional[PostingFrequency] = Field(default=None, alias="postingFrequency")
    best_time_to_post: Optional[str] = Field(
        default=None, alias="bestTimeToPost", pattern=r"^([01]\d|2[0-3]):[0-5]\d$"
    )
    include_hashtags: Optional[bool] = Field(default=None, alias="includeHashtags")
    include_trending_topics: Optional[bool] = Field(default=None, alias="includeTrendingTopics")
    max_hashtags: Optional[int] = Field(default=None, alias="maxHashtags", ge=0, le=30)

    class Config:
        populate_by_name = True


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    niche: Optional[str] = None
    target_audience: Optional[str] = Field(default=None, alias="targetAudience")
    posting_style: Optional[PostingStyle] = Field(default=None, alias="postingStyle")
    preferences: Optional[PreferencesUpdate] = None

    class Config:
        populate_by_name = True


class OnboardingRequest(BaseModel):
    niche: str = Field(min_length=1)
    target_audience: str = Field(alias="targetAudience", min_length=1)
    posting_style: PostingStyle = Field(alias="postingStyle")
    niches: Optional[List[NicheEntry]] = None

    class Config:
        populate_by_name = True


class SocialConnectRequest(BaseModel):
    platform: Literal["facebook", "linkedin"]
    access_token: str = Field(alias="accessToken", min_length=1)
    page_id: Optional[str] = Field(default=None, alias="pageId")
    profile_id: Optional[str] = Field(default=None, alias="profileId")

    class Config:
        populate_by_name = True


class ProfilingAnswers(BaseModel):
    """Answers to the profiling questions. Only the derived niches are stored."""
    answers: Optional[List[str]] = None
    niches: Optional[List[NicheEntry]] = None
