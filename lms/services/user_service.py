# lms/services/user_service.py
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lms.core.exceptions import (
    DepartmentNotFound,
    ProfileNotFound,
    UserNotFound,
    ValidationFailed,
)
from lms.models.department import Department
from lms.models.user import Profile, TeacherProfile, User
from lms.schemas.user import ProfileUpdate, TeacherProfileUpdate


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_or_404(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    if user is None:
        raise UserNotFound(user_id)
    return user


def upsert_profile(db: Session, *, user: User, obj_in: ProfileUpdate) -> Profile:
    profile = db.query(Profile).filter(Profile.user_id == user.id).first()
    if profile is None:
        profile = Profile(user_id=user.id, verified=False)

    # verified is only ever changed by verify_profile
    for field, value in obj_in.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)

    db.add(profile)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationFailed(f"student_id '{obj_in.student_id}' is already in use")
    db.refresh(profile)
    return profile


def verify_profile(db: Session, *, user_id: int) -> Profile:
    get_user_or_404(db, user_id)
    profile = db.query(Profile).filter(Profile.user_id == user_id).first()
    if profile is None:
        raise ProfileNotFound(user_id)

    profile.verified = True
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def upsert_teacher_profile(
    db: Session,
    *,
    user_id: int,
    obj_in: TeacherProfileUpdate,
) -> TeacherProfile:
    """Create or update a teacher's profile.

    ``department_id`` is only touched when the field was sent; an explicit
    ``null`` unassigns the department.
    """
    get_user_or_404(db, user_id)
    profile = (
        db.query(TeacherProfile).filter(TeacherProfile.user_id == user_id).first()
    )
    if profile is None:
        profile = TeacherProfile(user_id=user_id)

    if "department_id" in obj_in.model_fields_set:
        if obj_in.department_id is not None and db.get(Department, obj_in.department_id) is None:
            raise DepartmentNotFound(obj_in.department_id)
        profile.department_id = obj_in.department_id

    if obj_in.bio is not None:
        profile.bio = obj_in.bio
    if obj_in.experience is not None:
        profile.experience = obj_in.experience

    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile
