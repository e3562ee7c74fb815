"""
SocialPilot API Response Utilities
Standardized list responses and domain error handling
"""
from fastapi import Request
from fastapi.responses import JSONResponse
from typing import Any, Dict, List

from .errors import SocialPilotError
from .logging_config import api_logger


# ============================================================
# SUCCESS RESPONSES
# ============================================================

def listing(items: List[Any], total: int, limit: int, skip: int, key: str = "items") -> Dict:
    """Offset-paginated list response"""
    return {
        key: items,
        "total": total,
        "limit": limit,
        "skip": skip,
        "has_more": skip + len(items) < total,
    }


# ============================================================
# EXCEPTION HANDLER
# ============================================================

async def domain_error_handler(request: Request, exc: SocialPilotError) -> JSONResponse:
    """Translate domain errors into JSON error responses"""
    log = api_logger.error if exc.status_code >= 500 else api_logger.warning
    log(
        f"API Error: {exc.message}",
        status_code=exc.status_code,
        error_code=exc.error_code,
        path=request.url.path,
    )

    content = {
        "detail": exc.message,
        "error_code": exc.error_code,
    }
    if exc.details:
        content["details"] = exc.details

    return JSONResponse(status_code=exc.status_code, content=content)
