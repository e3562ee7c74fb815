"""
Pipeline service wiring.

Each getter builds its service once from the application settings. Routes
take them as FastAPI dependencies so tests can swap in doubles through
``app.dependency_overrides``.
"""
from functools import lru_cache

from .config import get_settings
from .database import SessionLocal
from .worker.caption_generator import CaptionGenerator, CaptionGeneratorConfig
from .worker.draft_assembler import DraftAssembler
from .worker.image_selector import ImageStore
from .worker.platform_publish import PlatformPublisher, PublisherConfig
from .worker.scheduler import PostScheduler


@lru_cache()
def get_caption_generator() -> CaptionGenerator:
    return CaptionGenerator(CaptionGeneratorConfig.from_settings(get_settings()))


@lru_cache()
def get_image_store() -> ImageStore:
    return ImageStore.from_settings(get_settings())


@lru_cache()
def get_draft_assembler() -> DraftAssembler:
    return DraftAssembler(get_caption_generator(), get_image_store())


@lru_cache()
def get_platform_publisher() -> PlatformPublisher:
    return PlatformPublisher(PublisherConfig.from_settings(get_settings()))


@lru_cache()
def get_post_scheduler() -> PostScheduler:
    """The process-wide auto-posting scheduler."""
    settings = get_settings()
    return PostScheduler(
        get_draft_assembler(),
        SessionLocal,
        timezone=settings.scheduler_timezone,
    )
