"""
Posts routes: generate drafts, edit them, approve and publish.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from ..auth import get_required_user
from ..database import get_db
from ..errors import ValidationError
from ..models.post import Post, PostStatus
from ..models.user import User
from ..responses import listing
from ..schemas.posts import PostUpdate
from ..services import get_draft_assembler, get_platform_publisher
from ..worker import lifecycle
from ..worker.analytics import recent_events
from ..worker.draft_assembler import DraftAssembler
from ..worker.platform_publish import PlatformPublisher

router = APIRouter(prefix="/api/posts", tags=["posts"])

STATUS_FILTERS = {s.value for s in PostStatus} | {"all"}


def _iso(value):
    return value.isoformat() if value else None


def post_to_dict(post: Post) -> dict:
    """Convert a Post model to a dictionary response."""
    return {
        "id": post.id,
        "userId": post.user_id,
        "caption": post.caption,
        "editedCaption": post.edited_caption,
        "hashtags": post.hashtags or [],
        "editedHashtags": post.edited_hashtags,
        "approvalNotes": post.approval_notes,
        "trendingTopics": post.trending_topics or [],
        "aiMetadata": post.ai_metadata or {},
        "imagePath": post.image_path,
        "imageUrl": post.image_url,
        "status": post.status,
        "generatedAt": _iso(post.generated_at),
        "approvedAt": _iso(post.approved_at),
        "postedAt": _iso(post.posted_at),
        "socialMediaIds": post.social_media_ids or {},
        "failureReason": post.failure_reason,
        "engagement": post.engagement,
        "createdAt": _iso(post.created_at),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def generate_post(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
    assembler: DraftAssembler = Depends(get_draft_assembler),
):
    """Generate a new AI draft for the current user."""
    post = assembler.generate_draft(db, current_user)
    return {"post": post_to_dict(post), "message": "Post generated successfully"}


@router.get("")
def get_posts(
    status_filter: str = Query("all", alias="status"),
    limit: int = Query(20, ge=1, le=100),
    skip: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """List the current user's posts, newest first."""
    if status_filter not in STATUS_FILTERS:
        raise ValidationError(f"Unknown status filter: {status_filter}", {"field": "status"})

    query = db.query(Post).filter(Post.user_id == current_user.id)
    if status_filter != "all":
        query = query.filter(Post.status == status_filter)

    total = query.count()
    posts = query.order_by(Post.created_at.desc(), Post.id.desc()).offset(skip).limit(limit).all()
    return listing([post_to_dict(p) for p in posts], total, limit, skip, key="posts")


@router.get("/analytics/all")
def get_post_analytics(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """The current user's most recent pipeline events."""
    events = recent_events(db, current_user.id)
    return {
        "analytics": [
            {
                "id": e.id,
                "postId": e.post_id,
                "eventType": e.event_type,
                "data": e.data or {},
                "timestamp": _iso(e.timestamp),
            }
            for e in events
        ]
    }


@router.get("/{post_id}")
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Get a single post (must belong to current user)."""
    post = lifecycle.get_owned_post(db, post_id, current_user.id)
    return {"post": post_to_dict(post)}


@router.put("/{post_id}")
def update_post(
    post_id: int,
    update: PostUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Edit a draft's caption, hashtags or approval notes."""
    post = lifecycle.get_owned_post(db, post_id, current_user.id)
    post = lifecycle.edit_draft(
        db,
        post,
        caption=update.caption,
        hashtags=update.hashtags,
        approval_notes=update.approval_notes,
    )
    return {"post": post_to_dict(post), "message": "Post updated successfully"}


@router.post("/{post_id}/approve")
def approve_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
    publisher: PlatformPublisher = Depends(get_platform_publisher),
):
    """
    Approve a draft and publish it to every connected platform.

    Partial failures still return 200; the per-platform results and the
    post status show what failed.
    """
    post = lifecycle.get_owned_post(db, post_id, current_user.id)
    post, results = lifecycle.approve_and_publish(db, post, current_user, publisher)

    message = (
        "Post approved and published successfully"
        if post.status == PostStatus.POSTED.value
        else "Post approved but publishing failed on one or more platforms"
    )
    return {
        "post": post_to_dict(post),
        "socialResults": [r.to_dict() for r in results],
        "message": message,
    }


@router.delete("/{post_id}")
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Delete a draft (must belong to current user)."""
    post = lifecycle.get_owned_post(db, post_id, current_user.id)
    lifecycle.delete_draft(db, post)
    return {"message": "Post deleted successfully"}
