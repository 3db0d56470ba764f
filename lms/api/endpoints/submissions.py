# lms/api/endpoints/submissions.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.core.security import Principal, get_current_principal, get_current_teacher
from lms.db.session import get_db
from lms.schemas.submission import SubmissionCreate, SubmissionPublic
from lms.services import submission_service

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.post("", response_model=SubmissionPublic, status_code=status.HTTP_201_CREATED)
def create_submission(
    obj_in: SubmissionCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Score the answers against the correct options and store one attempt.
    """
    return submission_service.create_submission(db, principal=principal, obj_in=obj_in)


@router.get("/user/{user_id}", response_model=List[SubmissionPublic])
def list_user_submissions(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    skip: int = 0,
    limit: int = 100,
):
    return submission_service.list_submissions_for_user(
        db, principal=principal, user_id=user_id, skip=skip, limit=limit
    )


@router.get("/assignment/{assignment_id}", response_model=List[SubmissionPublic])
def list_assignment_submissions(
    assignment_id: int,
    db: Session = Depends(get_db),
    _teacher=Depends(get_current_teacher),
    skip: int = 0,
    limit: int = 100,
):
    return submission_service.list_submissions_for_assignment(
        db, assignment_id=assignment_id, skip=skip, limit=limit
    )
