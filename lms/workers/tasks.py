"""
Progress tasks for the rq worker.
Enqueued after a submission when AUTO_RECOMPUTE_PROGRESS is on.
"""

import logging

from lms.core.exceptions import LMSError
from lms.db.session import SessionLocal
from lms.services.progress_service import recompute_progress

logger = logging.getLogger(__name__)


def progress_task(user_id: int, course_id: int) -> dict:
    """
    Recompute the enrollment progress of one (user, course) pair.

    Returns a small summary dict; failures are reported in the dict rather
    than raised so the job is not retried against a missing enrollment.
    """
    db = SessionLocal()
    try:
        logger.info(f"Starting progress task for user {user_id} course {course_id}")
        snapshot = recompute_progress(db, user_id=user_id, course_id=course_id)
        return {
            "status": "success",
            "enrollment_id": snapshot.enrollment.id,
            "user_id": user_id,
            "course_id": course_id,
            "progress": snapshot.progress,
            "total": snapshot.total,
            "completed": snapshot.completed,
        }

    except LMSError as e:
        logger.warning(f"Progress task skipped for user {user_id} course {course_id}: {e}")
        return {
            "status": "error",
            "user_id": user_id,
            "course_id": course_id,
            "error": e.code,
            "message": e.message,
        }

    finally:
        db.close()
