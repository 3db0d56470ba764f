# lms/api/endpoints/assignments.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.core.security import Principal, get_current_teacher
from lms.db.session import get_db
from lms.schemas.assignment import AssignmentCreate, AssignmentPublic, AssignmentUpdate
from lms.schemas.auth import MessageResponse
from lms.services import assignment_service

router = APIRouter(prefix="/assignments", tags=["assignments"])


@router.get("", response_model=List[AssignmentPublic])
def list_assignments(
    db: Session = Depends(get_db),
    course_id: int | None = None,
    skip: int = 0,
    limit: int = 100,
):
    return assignment_service.list_assignments(
        db, course_id=course_id, skip=skip, limit=limit
    )


@router.get("/{assignment_id}", response_model=AssignmentPublic)
def get_assignment(assignment_id: int, db: Session = Depends(get_db)):
    return assignment_service.get_assignment_or_404(db, assignment_id)


@router.post("", response_model=AssignmentPublic, status_code=status.HTTP_201_CREATED)
def create_assignment(
    obj_in: AssignmentCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    assignment = assignment_service.create_assignment(db, principal=principal, obj_in=obj_in)
    return assignment_service.get_assignment_or_404(db, assignment.id)


@router.put("/{assignment_id}", response_model=AssignmentPublic)
def update_assignment(
    assignment_id: int,
    obj_in: AssignmentUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    assignment = assignment_service.get_assignment_or_404(db, assignment_id)
    return assignment_service.update_assignment(
        db, principal=principal, db_obj=assignment, obj_in=obj_in
    )


@router.delete("/{assignment_id}", response_model=MessageResponse)
def delete_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    assignment = assignment_service.get_assignment_or_404(db, assignment_id)
    assignment_service.delete_assignment(db, principal=principal, db_obj=assignment)
    return MessageResponse(message="assignment deleted successfully")
