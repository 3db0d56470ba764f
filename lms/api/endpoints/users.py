# lms/api/endpoints/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lms.core.security import get_current_admin, get_current_student, get_current_user
from lms.db.session import get_db
from lms.models.user import User
from lms.schemas.user import (
    ProfilePublic,
    ProfileUpdate,
    TeacherProfilePublic,
    TeacherProfileUpdate,
    UserPublic,
)
from lms.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserPublic)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/me/profile", response_model=ProfilePublic)
def update_my_profile(
    obj_in: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    _student=Depends(get_current_student),
):
    return user_service.upsert_profile(db, user=current_user, obj_in=obj_in)


@router.put("/{user_id}/profile/verify", response_model=ProfilePublic)
def verify_student_profile(
    user_id: int,
    db: Session = Depends(get_db),
    _admin=Depends(get_current_admin),
):
    return user_service.verify_profile(db, user_id=user_id)


@router.put("/{user_id}/teacher_profile", response_model=TeacherProfilePublic)
def update_teacher_profile(
    user_id: int,
    obj_in: TeacherProfileUpdate,
    db: Session = Depends(get_db),
    _admin=Depends(get_current_admin),
):
    return user_service.upsert_teacher_profile(db, user_id=user_id, obj_in=obj_in)
