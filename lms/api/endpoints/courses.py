# lms/api/endpoints/courses.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.core.security import Principal, get_current_teacher
from lms.db.session import get_db
from lms.schemas.auth import MessageResponse
from lms.schemas.course import CourseCreate, CoursePublic, CourseUpdate
from lms.services import course_service

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=List[CoursePublic])
def list_courses(
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
):
    return course_service.list_courses(db, skip=skip, limit=limit)


@router.get("/{course_id}", response_model=CoursePublic)
def get_course(course_id: int, db: Session = Depends(get_db)):
    return course_service.get_course_or_404(db, course_id)


@router.post("", response_model=CoursePublic, status_code=status.HTTP_201_CREATED)
def create_course(
    obj_in: CourseCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    """
    Teacher/admin creates a course in the department their profile is assigned to.
    """
    course = course_service.create_course(db, principal=principal, obj_in=obj_in)
    return course_service.get_course_or_404(db, course.id)


@router.put("/{course_id}", response_model=CoursePublic)
def update_course(
    course_id: int,
    obj_in: CourseUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    course = course_service.get_course_or_404(db, course_id)
    course_service.update_course(db, principal=principal, db_obj=course, obj_in=obj_in)
    return course_service.get_course_or_404(db, course_id)


@router.delete("/{course_id}", response_model=MessageResponse)
def delete_course(
    course_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    course = course_service.get_course_or_404(db, course_id)
    course_service.delete_course(db, principal=principal, db_obj=course)
    return MessageResponse(message="course deleted successfully")
