# lms/services/progress_service.py
import logging
from dataclasses import dataclass

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from lms.core.exceptions import EnrollmentNotFound, NotOwner
from lms.core.security import Principal
from lms.models.assignment import Assignment
from lms.models.enrollment import Enrollment
from lms.models.submission import Submission
from lms.models.user import Role
from lms.services.enrollment_service import get_enrollment

logger = logging.getLogger(__name__)


@dataclass
class ProgressSnapshot:
    enrollment: Enrollment
    total: int
    completed: int

    @property
    def progress(self) -> float:
        return self.enrollment.progress


def compute_progress(completed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return completed / total * 100


def ensure_can_view(principal: Principal, user_id: int) -> None:
    if principal.role is Role.STUDENT and principal.user_id != user_id:
        raise NotOwner("students can only access their own records")


def count_assignments(db: Session, course_id: int) -> int:
    return (
        db.query(func.count(Assignment.id))
        .filter(Assignment.course_id == course_id)
        .scalar()
    ) or 0


def count_completed_assignments(db: Session, *, user_id: int, course_id: int) -> int:
    # distinct so resubmissions cannot push progress past 100
    return (
        db.query(func.count(distinct(Submission.assignment_id)))
        .join(Assignment, Submission.assignment_id == Assignment.id)
        .filter(Submission.user_id == user_id, Assignment.course_id == course_id)
        .scalar()
    ) or 0


def recompute_progress(db: Session, *, user_id: int, course_id: int) -> ProgressSnapshot:
    total = count_assignments(db, course_id)
    completed = count_completed_assignments(db, user_id=user_id, course_id=course_id)

    enrollment = get_enrollment(db, user_id=user_id, course_id=course_id)
    if enrollment is None:
        raise EnrollmentNotFound()

    enrollment.progress = compute_progress(completed, total)
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)

    logger.info(
        "Progress user=%s course=%s: %d/%d -> %.2f",
        user_id,
        course_id,
        completed,
        total,
        enrollment.progress,
    )
    return ProgressSnapshot(enrollment=enrollment, total=total, completed=completed)


def get_progress(db: Session, *, user_id: int, course_id: int) -> Enrollment:
    enrollment = get_enrollment(db, user_id=user_id, course_id=course_id)
    if enrollment is None:
        raise EnrollmentNotFound()
    return enrollment
