"""
Post Lifecycle

Owns the post state machine:

    draft --edit-->    draft
    draft --delete-->  (removed)
    draft --approve--> posted   every attempted platform succeeded
                       failed   at least one platform failed

Posts that have left ``draft`` are never edited, approved or deleted again.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import (
    AuthorizationError,
    NotFoundError,
    PersistenceError,
    StateConflictError,
    ValidationError,
)
from ..logging_config import db_logger, pipeline_logger
from ..models.post import Post, PostStatus
from ..models.user import User
from .analytics import record_event
from .platform_publish import (
    Platform,
    PlatformCredentials,
    PlatformPublisher,
    PublishRequest,
    PublishResult,
    format_caption,
)


def get_owned_post(db: Session, post_id: int, user_id: int) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")
    if post.user_id != user_id:
        raise AuthorizationError("You do not have access to this post")
    return post


def ensure_draft(post: Post, action: str) -> None:
    if post.status != PostStatus.DRAFT.value:
        raise StateConflictError(
            f"Can only {action} draft posts (post is {post.status})",
            {"status": post.status},
        )


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        db_logger.error("Commit failed", error=e, action=action)
        raise PersistenceError(f"Failed to {action}: {e}") from e


def edit_draft(
    db: Session,
    post: Post,
    caption: Optional[str] = None,
    hashtags: Optional[List[str]] = None,
    approval_notes: Optional[str] = None,
) -> Post:
    """Store user edits on a draft without changing its status."""
    ensure_draft(post, "edit")

    if caption is not None:
        if not caption.strip():
            raise ValidationError("Caption cannot be empty")
        post.edited_caption = caption
    if hashtags is not None:
        post.edited_hashtags = list(hashtags)
    if approval_notes is not None:
        post.approval_notes = approval_notes

    _commit(db, "update post")
    db.refresh(post)
    return post


def delete_draft(db: Session, post: Post) -> None:
    ensure_draft(post, "delete")
    db.delete(post)
    _commit(db, "delete post")


def user_credentials(user: User) -> Dict[Platform, PlatformCredentials]:
    """Publishing credentials for each connected account of ``user``."""
    credentials = {}
    for account in user.social_accounts:
        if not account.connected:
            continue
        try:
            platform = Platform(account.platform)
        except ValueError:
            continue
        credentials[platform] = PlatformCredentials(
            account_id=account.account_id,
            access_token=account.access_token,
        )
    return credentials


def apply_publish_results(post: Post, results: List[PublishResult], now: Optional[datetime] = None) -> Post:
    """
    Fold per-platform results into the post.

    Successful platforms record their external id; the first failure sets
    ``failure_reason`` and marks the post failed.
    """
    now = now or datetime.now(timezone.utc)
    social_ids = dict(post.social_media_ids or {})
    status = PostStatus.POSTED
    failure_reason = None

    for result in results:
        if result.success:
            social_ids[result.platform.value] = result.post_id
        else:
            status = PostStatus.FAILED
            if failure_reason is None:
                failure_reason = result.error

    post.social_media_ids = social_ids
    post.status = status.value
    post.failure_reason = failure_reason
    post.approved_at = now
    post.posted_at = now
    return post


def approve_and_publish(
    db: Session,
    post: Post,
    user: User,
    publisher: PlatformPublisher,
) -> Tuple[Post, List[PublishResult]]:
    """
    Publish a draft to every connected platform and record the outcome.

    Raises:
        StateConflictError: the post is not a draft.
        ValidationError: the user has no platform with complete credentials.
        PersistenceError: the outcome could not be saved.
    """
    ensure_draft(post, "approve")

    credentials = {p: c for p, c in user_credentials(user).items() if c.is_complete()}
    if not credentials:
        raise ValidationError("Connect a Facebook or LinkedIn account before approving posts")

    request = PublishRequest(
        caption=format_caption(post.display_caption, post.display_hashtags),
        image_url=post.image_url,
    )
    results = publisher.publish_to_all(credentials, request)

    apply_publish_results(post, results)
    record_event(db, user.id, "post_posted", {
        "caption": post.display_caption,
        "hashtags": post.display_hashtags,
        "platforms": [r.platform.value for r in results],
        "status": post.status,
    }, post_id=post.id)

    _commit(db, "save publish results")
    db.refresh(post)

    pipeline_logger.info(
        "Post published",
        post_id=post.id,
        status=post.status,
        succeeded=[r.platform.value for r in results if r.success],
        failed=[r.platform.value for r in results if not r.success],
    )
    return post, results
