# lms/api/endpoints/enrollments.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.core.security import (
    Principal,
    get_current_admin,
    get_current_principal,
    get_current_student,
    get_current_teacher,
)
from lms.db.session import get_db
from lms.schemas.auth import MessageResponse
from lms.schemas.enrollment import EnrollmentCreate, EnrollmentPublic, EnrollmentUpdate
from lms.services import enrollment_service

router = APIRouter(tags=["enrollments"])


@router.post(
    "/enrollments", response_model=EnrollmentPublic, status_code=status.HTTP_201_CREATED
)
def enroll_course(
    obj_in: EnrollmentCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_student),
):
    return enrollment_service.enroll(db, principal=principal, course_id=obj_in.course_id)


@router.get("/users/{user_id}/enrollments", response_model=List[EnrollmentPublic])
def list_user_enrollments(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return enrollment_service.list_for_user(db, principal=principal, user_id=user_id)


@router.get("/courses/{course_id}/enrollments", response_model=List[EnrollmentPublic])
def list_course_enrollments(
    course_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    return enrollment_service.list_for_course(db, principal=principal, course_id=course_id)


@router.put("/enrollments/{enrollment_id}", response_model=EnrollmentPublic)
def update_enrollment(
    enrollment_id: int,
    obj_in: EnrollmentUpdate,
    db: Session = Depends(get_db),
    _admin=Depends(get_current_admin),
):
    enrollment = enrollment_service.get_enrollment_or_404(db, enrollment_id)
    return enrollment_service.update_enrollment(db, db_obj=enrollment, obj_in=obj_in)


@router.delete("/enrollments/{enrollment_id}", response_model=MessageResponse)
def delete_enrollment(
    enrollment_id: int,
    db: Session = Depends(get_db),
    _admin=Depends(get_current_admin),
):
    enrollment = enrollment_service.get_enrollment_or_404(db, enrollment_id)
    enrollment_service.delete_enrollment(db, db_obj=enrollment)
    return MessageResponse(message="enrollment deleted successfully")
