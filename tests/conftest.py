"""
Pytest configuration and fixtures for SocialPilot API tests.
"""
import json
import os
from types import SimpleNamespace

# Must be set before the application (and its settings) are imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ["SCHEDULER_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from socialpilot.database import Base, get_db
from socialpilot.limiter import limiter
from socialpilot.main import app
from socialpilot.models.preferences import UserPreferences
from socialpilot.models.social_account import SocialAccount
from socialpilot.models.user import User
from socialpilot.auth import get_password_hash, create_access_token
from socialpilot.services import (
    get_caption_generator,
    get_draft_assembler,
    get_image_store,
    get_platform_publisher,
    get_post_scheduler,
)
from socialpilot.worker.caption_generator import CaptionGenerator, CaptionGeneratorConfig
from socialpilot.worker.draft_assembler import DraftAssembler
from socialpilot.worker.image_selector import ImageStore
from socialpilot.worker.platform_publish import PlatformPublisher, PublisherConfig
from socialpilot.worker.scheduler import PostScheduler

# Disable rate limiting for tests
limiter.enabled = False

# Use in-memory SQLite for tests with shared connection
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Global session for sharing across requests
_test_session = None

DEFAULT_COMPLETION = {
    "caption": "Shipping Rust services to production this week",
    "hashtags": ["#rust", "#tech", "#devops"],
    "trendingTopics": ["AI and Machine Learning", "rust trends"],
    "confidenceScore": 0.9,
}


def get_test_db():
    """Get the shared test database session."""
    global _test_session
    try:
        yield _test_session
    finally:
        pass


# ============================================================
# TEST DOUBLES
# ============================================================

class FakeCompletions:
    """Stands in for ``openai.OpenAI().chat.completions``"""

    def __init__(self, content=None, error=None):
        self.content = json.dumps(DEFAULT_COMPLETION) if content is None else content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    @property
    def last_prompt(self):
        return self.calls[-1]["messages"][-1]["content"]


class FakeCompletionClient:
    def __init__(self, content=None, error=None):
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)


class FakeResponse:
    def __init__(self, status_code=200, body=None, headers=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self._body = body if body is not None else {}
        self.headers = headers or {}

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeHTTPSession:
    """Stands in for ``requests.Session``; responses are keyed by platform"""

    def __init__(self):
        self.responses = {
            "facebook": FakeResponse(200, {"id": "123_456"}),
            "linkedin": FakeResponse(201, {"id": "urn:li:share:789"}),
        }
        self.errors = {}
        self.calls = []

    def post(self, url, **kwargs):
        platform = "facebook" if "facebook.com" in url else "linkedin"
        self.calls.append({"platform": platform, "url": url, **kwargs})
        if platform in self.errors:
            raise self.errors[platform]
        return self.responses[platform]

    def platforms_called(self):
        return [call["platform"] for call in self.calls]


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    global _test_session

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create a session
    _test_session = TestingSessionLocal()

    # Override the get_db dependency
    app.dependency_overrides[get_db] = get_test_db

    yield _test_session

    # Cleanup
    app.dependency_overrides.clear()
    _test_session.close()
    _test_session = None

    # Drop all tables
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def completion_client():
    return FakeCompletionClient()


@pytest.fixture
def caption_generator(completion_client):
    return CaptionGenerator(CaptionGeneratorConfig(api_key="test-key"), client=completion_client)


@pytest.fixture
def image_store(tmp_path):
    return ImageStore(str(tmp_path / "uploads"))


@pytest.fixture
def assembler(caption_generator, image_store):
    return DraftAssembler(caption_generator, image_store)


@pytest.fixture
def http_session():
    return FakeHTTPSession()


@pytest.fixture
def publisher(http_session):
    return PlatformPublisher(PublisherConfig(), session=http_session)


@pytest.fixture
def post_scheduler(assembler):
    scheduler = PostScheduler(assembler, TestingSessionLocal)
    yield scheduler
    scheduler.shutdown()


@pytest.fixture(scope="function")
def client(db, caption_generator, image_store, assembler, publisher, post_scheduler):
    """Create a test client with the pipeline services replaced by test doubles."""
    app.dependency_overrides[get_caption_generator] = lambda: caption_generator
    app.dependency_overrides[get_image_store] = lambda: image_store
    app.dependency_overrides[get_draft_assembler] = lambda: assembler
    app.dependency_overrides[get_platform_publisher] = lambda: publisher
    app.dependency_overrides[get_post_scheduler] = lambda: post_scheduler
    with TestClient(app) as c:
        yield c


def make_user(db, email="test@example.com", **fields):
    defaults = dict(
        email=email,
        hashed_password=get_password_hash("testpassword123"),
        name="Test User",
        is_active=True,
        niche="tech",
        target_audience="developers",
        posting_style="professional",
        niches=[{"name": "Systems", "keywords": ["rust"]}],
        past_posts=[
            {"caption": "one", "likes": 8, "comments": 2, "shares": 1},
            {"caption": "two", "likes": 12, "comments": 3, "shares": 0},
        ],
    )
    defaults.update(fields)
    user = User(**defaults)
    user.preferences = UserPreferences()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def test_user(db):
    """Create a test user."""
    return make_user(db)


@pytest.fixture
def user_factory(db):
    return lambda email, **fields: make_user(db, email=email, **fields)


@pytest.fixture(scope="function")
def other_user(db):
    return make_user(db, email="other@example.com", name="Other User")


@pytest.fixture(scope="function")
def connected_user(db, test_user):
    """The test user with Facebook and LinkedIn connected."""
    test_user.social_accounts.append(
        SocialAccount(platform="facebook", account_id="page-1", access_token="fb-token", connected=True)
    )
    test_user.social_accounts.append(
        SocialAccount(platform="linkedin", account_id="person-1", access_token="li-token", connected=True)
    )
    db.commit()
    db.refresh(test_user)
    return test_user


@pytest.fixture(scope="function")
def auth_token(test_user):
    """Get an auth token for the test user."""
    return create_access_token({"sub": str(test_user.id)})


@pytest.fixture(scope="function")
def auth_headers(auth_token):
    """Get auth headers for the test user."""
    return {"Authorization": f"Bearer {auth_token}"}
