# lms/api/endpoints/progress.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lms.core.security import Principal, get_current_principal
from lms.db.session import get_db
from lms.schemas.progress import ProgressPublic, ProgressResult, ProgressUpdateRequest
from lms.services import progress_service

router = APIRouter(prefix="/progress", tags=["progress"])


@router.post("/update", response_model=ProgressResult)
def update_progress(
    payload: ProgressUpdateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    progress_service.ensure_can_view(principal, payload.user_id)
    snapshot = progress_service.recompute_progress(
        db, user_id=payload.user_id, course_id=payload.course_id
    )
    return ProgressResult(
        enrollment_id=snapshot.enrollment.id,
        user_id=payload.user_id,
        course_id=payload.course_id,
        progress=snapshot.progress,
        total=snapshot.total,
        completed=snapshot.completed,
    )


@router.get("/{user_id}/{course_id}", response_model=ProgressPublic)
def get_progress(
    user_id: int,
    course_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    progress_service.ensure_can_view(principal, user_id)
    enrollment = progress_service.get_progress(db, user_id=user_id, course_id=course_id)
    return ProgressPublic(user_id=user_id, course_id=course_id, progress=enrollment.progress)
