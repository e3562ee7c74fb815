"""
Auto-posting Scheduler

One daily timer per user, fired at the user's ``best_time_to_post``
("HH:MM"). Each fire generates a draft post through the DraftAssembler.

The registry is process-wide:
- ``run()`` starts the underlying APScheduler on application startup,
  followed by ``start_all_schedulers()`` to register every user with
  auto-posting enabled
- ``shutdown()`` cancels every timer on application shutdown
- ``start_scheduler`` / ``stop_scheduler`` / ``start_all_schedulers`` are
  the only calls that change the registry

Timers live in this process only. Running several API processes against
the same database registers one timer per process for the same user.
"""

import threading
from typing import Callable, Dict, List, Optional, Tuple

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.orm import Session

from ..logging_config import scheduler_logger
from ..models.preferences import UserPreferences
from ..models.user import User
from .draft_assembler import DraftAssembler

DEFAULT_TIME = (9, 0)


def parse_time_of_day(value: Optional[str]) -> Tuple[int, int]:
    """
    Parse "HH:MM" into (hour, minute).

    Anything malformed or out of range falls back to 09:00.
    """
    try:
        hours, minutes = (value or "").strip().split(":")
        hour, minute = int(hours), int(minutes)
    except (ValueError, AttributeError):
        scheduler_logger.warning("Invalid posting time, using default", value=value)
        return DEFAULT_TIME

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        scheduler_logger.warning("Posting time out of range, using default", value=value)
        return DEFAULT_TIME
    return hour, minute


class PostScheduler:
    """Registry of per-user daily draft generation timers"""

    def __init__(
        self,
        assembler: DraftAssembler,
        session_factory: Callable[[], Session],
        scheduler: Optional[BackgroundScheduler] = None,
        timezone: Optional[str] = None,
    ):
        self._assembler = assembler
        self._session_factory = session_factory
        if scheduler is None:
            scheduler = BackgroundScheduler(timezone=timezone) if timezone else BackgroundScheduler()
        self._scheduler = scheduler
        self._jobs: Dict[int, Job] = {}
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def run(self):
        """Start firing registered timers."""
        if not self._scheduler.running:
            self._scheduler.start()
            scheduler_logger.info("Scheduler started")

    def shutdown(self):
        """Cancel every timer and stop the underlying scheduler."""
        with self._lock:
            for user_id, job in list(self._jobs.items()):
                self._remove_job(user_id, job)
            self._jobs.clear()

        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        scheduler_logger.info("Scheduler shut down")

    def _remove_job(self, user_id: int, job: Job):
        try:
            job.remove()
        except JobLookupError:
            scheduler_logger.debug("Timer already gone", user_id=user_id)

    def start_scheduler(self, user_id: int, time_of_day: Optional[str] = "09:00") -> bool:
        """
        Register a daily timer for ``user_id``.

        Returns False without changes when the user already has a timer.
        """
        hour, minute = parse_time_of_day(time_of_day)

        with self._lock:
            if user_id in self._jobs:
                scheduler_logger.info("Scheduler already running for user", user_id=user_id)
                return False

            job = self._scheduler.add_job(
                self.generate_for_user,
                "cron",
                hour=hour,
                minute=minute,
                args=[user_id],
                id=f"autopost-{user_id}",
                replace_existing=True,
                coalesce=True,
                max_instances=1,
            )
            self._jobs[user_id] = job

        scheduler_logger.info("Scheduler started for user", user_id=user_id, time=f"{hour:02d}:{minute:02d}")
        return True

    def stop_scheduler(self, user_id: int) -> bool:
        """Cancel the user's timer. Returns False when there was none."""
        with self._lock:
            job = self._jobs.pop(user_id, None)
            if job is None:
                return False
            self._remove_job(user_id, job)

        scheduler_logger.info("Scheduler stopped for user", user_id=user_id)
        return True

    def restart_scheduler(self, user_id: int, time_of_day: Optional[str]) -> bool:
        self.stop_scheduler(user_id)
        return self.start_scheduler(user_id, time_of_day)

    def start_all_schedulers(self, db: Session) -> int:
        """Register a timer for every user with auto-posting enabled."""
        users = (
            db.query(User)
            .join(UserPreferences, UserPreferences.user_id == User.id)
            .filter(UserPreferences.auto_posting_enabled.is_(True))
            .all()
        )

        for user in users:
            self.start_scheduler(user.id, user.preferences.best_time_to_post)

        scheduler_logger.info("Started schedulers", count=len(users))
        return len(users)

    def generate_for_user(self, user_id: int):
        """
        Timer body: generate a draft for ``user_id``.

        Skips users that were deleted or turned auto-posting off since the
        timer was registered. Errors are logged and never propagate, so the
        timer keeps firing on later days.
        """
        db = self._session_factory()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            if not user:
                scheduler_logger.info("Skipping scheduled generation, user not found", user_id=user_id)
                return
            if not user.preferences or not user.preferences.auto_posting_enabled:
                scheduler_logger.info("Skipping scheduled generation, auto-posting disabled", user_id=user_id)
                return

            post = self._assembler.generate_draft(db, user)
            scheduler_logger.info("Daily post generated", user_id=user_id, post_id=post.id)
        except Exception as e:
            scheduler_logger.error("Scheduled generation failed", error=e, user_id=user_id)
        finally:
            db.close()

    def is_running_for(self, user_id: int) -> bool:
        with self._lock:
            return user_id in self._jobs

    def active_users(self) -> List[int]:
        with self._lock:
            return sorted(self._jobs)

    def status(self, user_id: int) -> Dict:
        with self._lock:
            return {
                "userId": user_id,
                "isRunning": user_id in self._jobs,
                "totalSchedulers": len(self._jobs),
            }
