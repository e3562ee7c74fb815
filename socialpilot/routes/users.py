"""
User profile routes: profile, onboarding, social accounts and auto-posting.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_required_user
from ..database import get_db
from ..errors import ValidationError
from ..models.preferences import UserPreferences
from ..models.social_account import SocialAccount, SUPPORTED_PLATFORMS
from ..models.user import User
from ..schemas.users import OnboardingRequest, ProfileUpdate, ProfilingAnswers, SocialConnectRequest
from ..services import get_caption_generator, get_post_scheduler
from ..worker.caption_generator import CaptionGenerator
from ..worker.scheduler import PostScheduler

router = APIRouter(prefix="/api/users", tags=["users"])

PREFERENCE_FIELDS = {
    "auto_posting_enabled": "autoPostingEnabled",
    "posting_frequency": "postingFrequency",
    "best_time_to_post": "bestTimeToPost",
    "include_hashtags": "includeHashtags",
    "include_trending_topics": "includeTrendingTopics",
    "max_hashtags": "maxHashtags",
}


def _preferences(user: User) -> UserPreferences:
    if user.preferences is None:
        user.preferences = UserPreferences()
    return user.preferences


def preferences_to_dict(prefs: UserPreferences) -> dict:
    return {key: getattr(prefs, field) for field, key in PREFERENCE_FIELDS.items()}


def user_to_dict(user: User) -> dict:
    """Convert a User model to a dictionary response (tokens are never returned)."""
    accounts = {}
    for platform in SUPPORTED_PLATFORMS:
        account = user.social_account(platform)
        id_key = "pageId" if platform == "facebook" else "profileId"
        accounts[platform] = {
            id_key: account.account_id if account else None,
            "connected": bool(account and account.connected),
        }

    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "niche": user.niche,
        "niches": user.niches or [],
        "targetAudience": user.target_audience,
        "postingStyle": user.posting_style,
        "socialMediaAccounts": accounts,
        "preferences": preferences_to_dict(_preferences(user)),
        "profileCompleteness": user.profile_completeness,
        "isOnboarded": user.is_onboarded,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }


def sync_scheduler(scheduler: PostScheduler, user: User, time_changed: bool = False):
    """Start, restart or stop the user's auto-posting timer to match preferences."""
    prefs = _preferences(user)
    if prefs.auto_posting_enabled:
        if time_changed:
            scheduler.restart_scheduler(user.id, prefs.best_time_to_post)
        else:
            scheduler.start_scheduler(user.id, prefs.best_time_to_post)
    else:
        scheduler.stop_scheduler(user.id)


@router.get("/profile")
def get_profile(current_user: User = Depends(get_required_user)):
    """Get the current user's profile."""
    return {"user": user_to_dict(current_user)}


@router.put("/profile")
def update_profile(
    update: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
    scheduler: PostScheduler = Depends(get_post_scheduler),
):
    """Update profile fields and preferences."""
    data = update.model_dump(exclude_unset=True, exclude={"preferences"})
    for field, value in data.items():
        if value is not None:
            setattr(current_user, field, value)

    prefs = _preferences(current_user)
    prefs_changed = False
    time_changed = False
    if update.preferences is not None:
        for field, value in update.preferences.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            if field == "best_time_to_post" and value != prefs.best_time_to_post:
                time_changed = True
            setattr(prefs, field, value)
            prefs_changed = True

    current_user.profile_completeness = current_user.calculate_profile_completeness()
    db.commit()
    db.refresh(current_user)

    if prefs_changed:
        sync_scheduler(scheduler, current_user, time_changed)

    return {"user": user_to_dict(current_user), "message": "Profile updated successfully"}


@router.post("/onboarding/complete")
def complete_onboarding(
    data: OnboardingRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Store the onboarding answers and mark the user onboarded."""
    current_user.niche = data.niche
    current_user.target_audience = data.target_audience
    current_user.posting_style = data.posting_style
    if data.niches is not None:
        current_user.niches = [n.model_dump() for n in data.niches]
    current_user.is_onboarded = True
    current_user.profile_completeness = current_user.calculate_profile_completeness()

    db.commit()
    db.refresh(current_user)
    return {"user": user_to_dict(current_user), "message": "Onboarding completed successfully"}


@router.post("/social-media/connect")
def connect_social_media(
    data: SocialConnectRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Store publishing credentials for Facebook or LinkedIn."""
    account_id = data.page_id if data.platform == "facebook" else data.profile_id
    if not account_id:
        id_field = "pageId" if data.platform == "facebook" else "profileId"
        raise ValidationError(f"{id_field} is required to connect {data.platform}", {"field": id_field})

    account = current_user.social_account(data.platform)
    if account is None:
        account = SocialAccount(platform=data.platform)
        current_user.social_accounts.append(account)

    account.account_id = account_id
    account.access_token = data.access_token
    account.connected = True
    current_user.profile_completeness = current_user.calculate_profile_completeness()

    db.commit()
    db.refresh(current_user)
    return {
        "user": user_to_dict(current_user),
        "message": f"{data.platform} account connected successfully",
    }


@router.get("/profiling/questions")
def get_profiling_questions(
    current_user: User = Depends(get_required_user),
    generator: CaptionGenerator = Depends(get_caption_generator),
):
    """AI-generated questions that help narrow down the user's niche."""
    questions = generator.generate_profiling_questions({
        "niche": current_user.niche,
        "targetAudience": current_user.target_audience,
    })
    return {"questions": questions}


@router.post("/profiling/answers")
def save_profiling_answers(
    data: ProfilingAnswers,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Store niches derived from the profiling answers."""
    if data.niches is not None:
        current_user.niches = [n.model_dump() for n in data.niches]
    current_user.profile_completeness = current_user.calculate_profile_completeness()

    db.commit()
    db.refresh(current_user)
    return {"user": user_to_dict(current_user), "message": "Profiling answers saved successfully"}


@router.get("/scheduler")
def get_scheduler_status(
    current_user: User = Depends(get_required_user),
    scheduler: PostScheduler = Depends(get_post_scheduler),
):
    """Whether the current user has an active auto-posting timer."""
    return scheduler.status(current_user.id)
