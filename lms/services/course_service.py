# lms/services/course_service.py
"""Course CRUD and the department authorization gate.

Creating a course, or moving it to another department, requires the caller's
TeacherProfile to be assigned to exactly that department.
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from lms.core.exceptions import (
    CourseNotFound,
    DepartmentMismatch,
    DepartmentNotFound,
    DepartmentRequired,
    DuplicateCourseCode,
    NotCourseOwner,
    RoleForbidden,
    TeacherProfileMissing,
    DepartmentUnassigned,
)
from lms.core.security import Principal
from lms.models.course import Course
from lms.models.department import Department
from lms.models.user import Role, TeacherProfile
from lms.schemas.course import CourseCreate, CourseUpdate

logger = logging.getLogger(__name__)


def check_department_authority(
    db: Session, *, user_id: int, department_id: int
) -> Department:
    """Return the department if ``user_id`` may place courses in it."""
    profile = (
        db.query(TeacherProfile).filter(TeacherProfile.user_id == user_id).first()
    )
    if profile is None:
        raise TeacherProfileMissing(
            "Teacher profile validation failed",
            details="You must have a complete teacher profile to create courses.",
        )

    if profile.department_id is None:
        raise DepartmentUnassigned(
            "Department not assigned",
            details="Your teacher profile must be assigned to a department.",
        )

    if profile.department_id != department_id:
        raise DepartmentMismatch(
            "Authorization Failed: Department Mismatch",
            details=(
                f"You are authorized only for Department ID {profile.department_id}, "
                f"not the requested Department ID {department_id}"
            ),
        )

    department = db.get(Department, department_id)
    if department is None:
        raise DepartmentNotFound(department_id)
    return department


def _commit_course(db: Session, course: Course) -> Course:
    # rollback expires the instance; keep the requested code for the message
    code = course.code
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if "code" in str(e.orig).lower():
            raise DuplicateCourseCode(f"course code '{code}' already exists")
        raise
    db.refresh(course)
    return course


def create_course(db: Session, *, principal: Principal, obj_in: CourseCreate) -> Course:
    if not obj_in.department_id:
        raise DepartmentRequired("department_id is required")

    check_department_authority(
        db, user_id=principal.user_id, department_id=obj_in.department_id
    )

    course = Course(
        teacher_id=principal.user_id,
        department_id=obj_in.department_id,
        title=obj_in.title,
        code=obj_in.code,
        description=obj_in.description,
        credits=obj_in.credits,
    )
    db.add(course)
    course = _commit_course(db, course)
    logger.info(
        "Course %s created by user %s in department %s",
        course.id,
        principal.user_id,
        course.department_id,
    )
    return course


def get_course(db: Session, course_id: int) -> Optional[Course]:
    return (
        db.query(Course)
        .options(joinedload(Course.department))
        .filter(Course.id == course_id)
        .first()
    )


def get_course_or_404(db: Session, course_id: int) -> Course:
    course = get_course(db, course_id)
    if course is None:
        raise CourseNotFound(course_id)
    return course


def list_courses(db: Session, *, skip: int = 0, limit: int = 100) -> List[Course]:
    return (
        db.query(Course)
        .options(joinedload(Course.department))
        .order_by(Course.id.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def ensure_course_owner(principal: Principal, course: Course) -> None:
    match principal.role:
        case Role.ADMIN:
            return
        case Role.TEACHER:
            if course.teacher_id != principal.user_id:
                raise NotCourseOwner(
                    "Forbidden: You can only manage courses you created."
                )
        case Role.STUDENT:
            raise RoleForbidden("Forbidden: insufficient permissions")


def update_course(
    db: Session,
    *,
    principal: Principal,
    db_obj: Course,
    obj_in: CourseUpdate,
) -> Course:
    ensure_course_owner(principal, db_obj)

    update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)

    new_department = update_data.pop("department_id", None)
    # 0 means "not provided"
    if new_department and new_department != db_obj.department_id:
        check_department_authority(
            db, user_id=principal.user_id, department_id=new_department
        )
        db_obj.department_id = new_department

    for field, value in update_data.items():
        setattr(db_obj, field, value)

    db.add(db_obj)
    return _commit_course(db, db_obj)


def delete_course(db: Session, *, principal: Principal, db_obj: Course) -> None:
    ensure_course_owner(principal, db_obj)
    db.delete(db_obj)
    db.commit()
