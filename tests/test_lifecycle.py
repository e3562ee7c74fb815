"""
Tests for the post state machine.
"""
from datetime import datetime, timezone

import pytest

from socialpilot.errors import (
    AuthorizationError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from socialpilot.models.post import Post
from socialpilot.models.social_account import SocialAccount
from socialpilot.worker import lifecycle
from socialpilot.worker.platform_publish import Platform, PublishResult


@pytest.fixture
def draft(db, test_user):
    post = Post(user_id=test_user.id, caption="Draft", hashtags=["#x"], status="draft")
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


class TestOwnership:

    def test_owned_post(self, db, test_user, draft):
        assert lifecycle.get_owned_post(db, draft.id, test_user.id) is draft

    def test_missing_post(self, db, test_user):
        with pytest.raises(NotFoundError):
            lifecycle.get_owned_post(db, 404, test_user.id)

    def test_other_owner(self, db, other_user, draft):
        with pytest.raises(AuthorizationError):
            lifecycle.get_owned_post(db, draft.id, other_user.id)


class TestEditDraft:

    def test_partial_edit_keeps_other_fields(self, db, draft):
        lifecycle.edit_draft(db, draft, hashtags=["#new"])
        assert draft.edited_caption is None
        assert draft.edited_hashtags == ["#new"]
        assert draft.display_caption == "Draft"
        assert draft.display_hashtags == ["#new"]

    def test_empty_hashtags_override_generated(self, db, draft):
        lifecycle.edit_draft(db, draft, hashtags=[])
        assert draft.display_hashtags == []

    @pytest.mark.parametrize("status", ["posted", "failed", "approved", "scheduled"])
    def test_only_drafts(self, db, draft, status):
        draft.status = status
        db.commit()
        with pytest.raises(StateConflictError):
            lifecycle.edit_draft(db, draft, caption="x")
        with pytest.raises(StateConflictError):
            lifecycle.delete_draft(db, draft)


class TestApplyPublishResults:

    def test_all_success(self, draft):
        now = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
        results = [
            PublishResult(success=True, platform=Platform.FACEBOOK, post_id="fb-1"),
            PublishResult(success=True, platform=Platform.LINKEDIN, post_id="li-1"),
        ]

        lifecycle.apply_publish_results(draft, results, now=now)

        assert draft.status == "posted"
        assert draft.social_media_ids == {"facebook": "fb-1", "linkedin": "li-1"}
        assert draft.failure_reason is None
        assert draft.approved_at == now
        assert draft.posted_at == now

    def test_first_failure_wins(self, draft):
        results = [
            PublishResult(success=False, platform=Platform.FACEBOOK, error="fb down"),
            PublishResult(success=False, platform=Platform.LINKEDIN, error="li down"),
        ]

        lifecycle.apply_publish_results(draft, results)

        assert draft.status == "failed"
        assert draft.failure_reason == "fb down"
        assert draft.social_media_ids == {}


class TestApproveAndPublish:

    def test_disconnected_accounts_ignored(self, db, test_user, draft, publisher):
        test_user.social_accounts.append(
            SocialAccount(platform="facebook", account_id="page", access_token="tok", connected=False)
        )
        db.commit()

        with pytest.raises(ValidationError):
            lifecycle.approve_and_publish(db, draft, test_user, publisher)
        assert draft.status == "draft"

    def test_account_without_token_ignored(self, db, test_user, draft, publisher, http_session):
        test_user.social_accounts.append(
            SocialAccount(platform="facebook", account_id="page", access_token="tok", connected=True)
        )
        test_user.social_accounts.append(
            SocialAccount(platform="linkedin", account_id="person", access_token=None, connected=True)
        )
        db.commit()

        post, results = lifecycle.approve_and_publish(db, draft, test_user, publisher)

        assert http_session.platforms_called() == ["facebook"]
        assert post.status == "posted"
        assert post.social_media_ids == {"facebook": "123_456"}
