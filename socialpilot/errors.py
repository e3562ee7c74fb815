"""
Domain exceptions raised by the post pipeline and mapped to HTTP responses
by :func:`socialpilot.responses.domain_error_handler`.
"""
from typing import Any, Dict, Optional


class SocialPilotError(Exception):
    """Base class for all domain errors."""

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(SocialPilotError):
    """A required field is missing or invalid."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class AuthorizationError(SocialPilotError):
    """The requester does not own the resource."""

    status_code = 403
    error_code = "FORBIDDEN"


class NotFoundError(SocialPilotError):
    """The requested entity does not exist."""

    status_code = 404
    error_code = "NOT_FOUND"


class StateConflictError(SocialPilotError):
    """The operation is not valid for the entity's current status."""

    status_code = 409
    error_code = "STATE_CONFLICT"


class GenerationError(SocialPilotError):
    """Trend lookup, caption generation or draft assembly failed."""

    status_code = 502
    error_code = "GENERATION_FAILED"


class PlatformPublishError(SocialPilotError):
    """Delivery to a single social platform failed."""

    status_code = 502
    error_code = "PUBLISH_FAILED"

    def __init__(self, platform: str, message: str):
        super().__init__(message, {"platform": platform})
        self.platform = platform


class PersistenceError(SocialPilotError):
    """The database was unavailable or rejected a write."""

    status_code = 503
    error_code = "PERSISTENCE_ERROR"
