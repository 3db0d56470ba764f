# lms/services/enrollment_service.py
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lms.core.exceptions import (
    DuplicateEnrollment,
    EnrollmentNotFound,
    NotOwner,
)
from lms.core.security import Principal
from lms.models.enrollment import Enrollment
from lms.models.user import Role
from lms.schemas.enrollment import EnrollmentUpdate
from lms.services.course_service import ensure_course_owner, get_course_or_404

logger = logging.getLogger(__name__)


def enroll(db: Session, *, principal: Principal, course_id: int) -> Enrollment:
    """Create a ``(student, course)`` enrollment at 0% progress.

    The pre-check catches the common duplicate; two concurrent requests can
    both pass it, in which case the unique constraint rejects the second
    insert and it surfaces as the same error.
    """
    course = get_course_or_404(db, course_id)

    existing = get_enrollment(db, user_id=principal.user_id, course_id=course.id)
    if existing is not None:
        raise DuplicateEnrollment("already enrolled in this course")

    enrollment = Enrollment(
        user_id=principal.user_id,
        course_id=course.id,
        progress=0.0,
        status="active",
    )
    db.add(enrollment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(
            "Concurrent enrollment rejected by constraint: user=%s course=%s",
            principal.user_id,
            course.id,
        )
        raise DuplicateEnrollment("already enrolled in this course")
    db.refresh(enrollment)
    return enrollment


def get_enrollment(db: Session, *, user_id: int, course_id: int) -> Optional[Enrollment]:
    return (
        db.query(Enrollment)
        .filter(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
        .first()
    )


def get_enrollment_or_404(db: Session, enrollment_id: int) -> Enrollment:
    enrollment = db.get(Enrollment, enrollment_id)
    if enrollment is None:
        raise EnrollmentNotFound(enrollment_id)
    return enrollment


def list_for_user(db: Session, *, principal: Principal, user_id: int) -> List[Enrollment]:
    if principal.role is Role.STUDENT and principal.user_id != user_id:
        raise NotOwner("students can only view their own enrollments")
    return (
        db.query(Enrollment)
        .filter(Enrollment.user_id == user_id)
        .order_by(Enrollment.id.asc())
        .all()
    )


def list_for_course(db: Session, *, principal: Principal, course_id: int) -> List[Enrollment]:
    course = get_course_or_404(db, course_id)
    ensure_course_owner(principal, course)
    return (
        db.query(Enrollment)
        .filter(Enrollment.course_id == course.id)
        .order_by(Enrollment.id.asc())
        .all()
    )


def update_enrollment(
    db: Session,
    *,
    db_obj: Enrollment,
    obj_in: EnrollmentUpdate,
) -> Enrollment:
    update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def delete_enrollment(db: Session, *, db_obj: Enrollment) -> None:
    db.delete(db_obj)
    db.commit()
