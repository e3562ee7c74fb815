"""
Analytics event log helpers.
"""
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..models.analytics import AnalyticsEvent, EVENT_TYPES


def record_event(
    db: Session,
    user_id: int,
    event_type: str,
    data: Optional[Dict[str, Any]] = None,
    post_id: Optional[int] = None,
) -> AnalyticsEvent:
    """Stage an analytics event on the session; the caller commits."""
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unknown analytics event type: {event_type}")

    event = AnalyticsEvent(
        user_id=user_id,
        post_id=post_id,
        event_type=event_type,
        data=data or {},
    )
    db.add(event)
    return event


def recent_events(db: Session, user_id: int, limit: int = 100):
    return (
        db.query(AnalyticsEvent)
        .filter(AnalyticsEvent.user_id == user_id)
        .order_by(AnalyticsEvent.timestamp.desc(), AnalyticsEvent.id.desc())
        .limit(limit)
        .all()
    )
