"""
Platform Publishing

Publish approved posts to:
- Facebook pages (Graph API feed endpoint)
- LinkedIn profiles (UGC posts API)

Credentials are passed per call, one set per platform. Each platform is
attempted independently; a failure on one is recorded in its result and
never stops the others.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

import requests

from ..config import Settings
from ..errors import PlatformPublishError
from ..logging_config import publisher_logger


class Platform(Enum):
    """Supported publish platforms"""
    FACEBOOK = "facebook"
    LINKEDIN = "linkedin"


@dataclass
class PlatformCredentials:
    """Account id (page id / profile id) and access token for one platform"""
    account_id: Optional[str]
    access_token: Optional[str]

    def is_complete(self) -> bool:
        return bool(self.account_id and self.access_token)


@dataclass
class PublishRequest:
    """Content to publish"""
    caption: str
    image_url: Optional[str] = None


@dataclass
class PublishResult:
    """Result of a publish attempt"""
    success: bool
    platform: Platform
    post_id: Optional[str] = None
    url: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        data = {"platform": self.platform.value, "success": self.success}
        if self.success:
            data["postId"] = self.post_id
            data["url"] = self.url
        else:
            data["error"] = self.error
        return data


@dataclass
class PublisherConfig:
    graph_api_version: str = "v18.0"
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "PublisherConfig":
        return cls(
            graph_api_version=settings.facebook_graph_version,
            timeout=settings.publish_timeout,
        )


def format_caption(caption: str, hashtags: List[str]) -> str:
    """Caption followed by a blank line and the space-separated hashtags."""
    return f"{caption}\n\n{' '.join(hashtags)}"


def _response_error(response: requests.Response) -> str:
    """Best-effort error message from a platform error response"""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if body.get("message"):
            return body["message"]
    return f"HTTP {response.status_code}"


# ============================================================
# FACEBOOK
# ============================================================

class FacebookPublisher:
    """Publish to a Facebook page feed"""

    platform = Platform.FACEBOOK

    def __init__(self, session: requests.Session, config: PublisherConfig):
        self.session = session
        self.config = config

    def publish(self, credentials: PlatformCredentials, request: PublishRequest) -> PublishResult:
        if not credentials.is_complete():
            raise PlatformPublishError(self.platform.value, "Facebook credentials not configured")

        url = f"https://graph.facebook.com/{self.config.graph_api_version}/{credentials.account_id}/feed"
        payload = {
            "message": request.caption,
            "access_token": credentials.access_token,
        }
        if request.image_url:
            payload["picture"] = request.image_url
            payload["link"] = request.image_url

        try:
            response = self.session.post(url, data=payload, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise PlatformPublishError(self.platform.value, f"Failed to post to Facebook: {e}") from e

        if not response.ok:
            raise PlatformPublishError(
                self.platform.value,
                f"Failed to post to Facebook: {_response_error(response)}",
            )

        post_id = response.json().get("id")
        if not post_id:
            raise PlatformPublishError(self.platform.value, "Failed to post to Facebook: no post id returned")

        return PublishResult(
            success=True,
            platform=self.platform,
            post_id=post_id,
            url=f"https://facebook.com/{post_id}",
        )


# ============================================================
# LINKEDIN
# ============================================================

class LinkedInPublisher:
    """Publish a UGC share to a LinkedIn member profile"""

    platform = Platform.LINKEDIN
    API_URL = "https://api.linkedin.com/v2/ugcPosts"

    def __init__(self, session: requests.Session, config: PublisherConfig):
        self.session = session
        self.config = config

    def _payload(self, profile_id: str, request: PublishRequest) -> Dict:
        media = []
        if request.image_url:
            media.append({
                "status": "READY",
                "description": {"text": "Image"},
                "media": request.image_url,
                "title": {"text": "Post Image"},
            })

        return {
            "author": f"urn:li:person:{profile_id}",
            "lifecycleState": "PUBLISHED",
            "specificContent": {
                "com.linkedin.ugc.ShareContent": {
                    "shareCommentary": {"text": request.caption},
                    "shareMediaCategory": "IMAGE" if media else "NONE",
                    "media": media,
                },
            },
            "visibility": {"com.linkedin.ugc.MemberNetworkVisibility": "PUBLIC"},
        }

    def publish(self, credentials: PlatformCredentials, request: PublishRequest) -> PublishResult:
        if not credentials.is_complete():
            raise PlatformPublishError(self.platform.value, "LinkedIn credentials not configured")

        headers = {
            "Authorization": f"Bearer {credentials.access_token}",
            "Content-Type": "application/json",
            "X-Restli-Protocol-Version": "2.0.0",
        }

        try:
            response = self.session.post(
                self.API_URL,
                json=self._payload(credentials.account_id, request),
                headers=headers,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise PlatformPublishError(self.platform.value, f"Failed to post to LinkedIn: {e}") from e

        if not response.ok:
            raise PlatformPublishError(
                self.platform.value,
                f"Failed to post to LinkedIn: {_response_error(response)}",
            )

        # LinkedIn returns the share URN in the body and the X-RestLi-Id header
        post_id = response.headers.get("X-RestLi-Id")
        if not post_id:
            post_id = response.json().get("id")
        if not post_id:
            raise PlatformPublishError(self.platform.value, "Failed to post to LinkedIn: no post id returned")

        return PublishResult(
            success=True,
            platform=self.platform,
            post_id=post_id,
            url=f"https://linkedin.com/feed/update/{post_id}",
        )


# ============================================================
# UNIFIED PUBLISHER
# ============================================================

class PlatformPublisher:
    """Unified interface for all platform publishers"""

    def __init__(self, config: PublisherConfig, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.publishers = {
            Platform.FACEBOOK: FacebookPublisher(self.session, config),
            Platform.LINKEDIN: LinkedInPublisher(self.session, config),
        }

    def publish_to_all(
        self,
        credentials: Dict[Platform, PlatformCredentials],
        request: PublishRequest,
    ) -> List[PublishResult]:
        """
        Publish to every platform that has complete credentials.

        Platforms without complete credentials are skipped. The returned list
        holds one result per attempted platform, in attempt order.
        """
        results = []
        for platform, publisher in self.publishers.items():
            creds = credentials.get(platform)
            if not creds or not creds.is_complete():
                continue

            try:
                result = publisher.publish(creds, request)
                publisher_logger.info("Published post", platform=platform.value, post_id=result.post_id)
            except Exception as e:
                message = e.message if isinstance(e, PlatformPublishError) else str(e)
                publisher_logger.warning("Publish failed", platform=platform.value, error_message=message)
                result = PublishResult(success=False, platform=platform, error=message)

            results.append(result)

        return results
