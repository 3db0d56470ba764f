# lms/api/endpoints/questions.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.core.security import Principal, get_current_teacher
from lms.db.session import get_db
from lms.schemas.assignment import (
    OptionCreate,
    OptionPublic,
    OptionUpdate,
    QuestionCreate,
    QuestionPublic,
    QuestionUpdate,
)
from lms.schemas.auth import MessageResponse
from lms.services import assignment_service

router = APIRouter(tags=["questions"])


# ---------- questions ----------


@router.get("/assignments/{assignment_id}/questions", response_model=List[QuestionPublic])
def list_questions(assignment_id: int, db: Session = Depends(get_db)):
    return assignment_service.list_questions(db, assignment_id=assignment_id)


@router.post(
    "/assignments/{assignment_id}/questions",
    response_model=QuestionPublic,
    status_code=status.HTTP_201_CREATED,
)
def create_question(
    assignment_id: int,
    obj_in: QuestionCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    return assignment_service.create_question(
        db, principal=principal, assignment_id=assignment_id, obj_in=obj_in
    )


@router.put("/questions/{question_id}", response_model=QuestionPublic)
def update_question(
    question_id: int,
    obj_in: QuestionUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    question = assignment_service.get_question_or_404(db, question_id)
    return assignment_service.update_question(
        db, principal=principal, db_obj=question, obj_in=obj_in
    )


@router.delete("/questions/{question_id}", response_model=MessageResponse)
def delete_question(
    question_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    question = assignment_service.get_question_or_404(db, question_id)
    assignment_service.delete_question(db, principal=principal, db_obj=question)
    return MessageResponse(message="question deleted successfully")


# ---------- options ----------


@router.get("/questions/{question_id}/options", response_model=List[OptionPublic])
def list_options(question_id: int, db: Session = Depends(get_db)):
    return assignment_service.list_options(db, question_id=question_id)


@router.post(
    "/questions/{question_id}/options",
    response_model=OptionPublic,
    status_code=status.HTTP_201_CREATED,
)
def create_option(
    question_id: int,
    obj_in: OptionCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    return assignment_service.create_option(
        db, principal=principal, question_id=question_id, obj_in=obj_in
    )


@router.put("/questions/{question_id}/options/{option_id}", response_model=OptionPublic)
def update_option(
    question_id: int,
    option_id: int,
    obj_in: OptionUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    option = assignment_service.get_option_or_404(
        db, question_id=question_id, option_id=option_id
    )
    return assignment_service.update_option(
        db, principal=principal, db_obj=option, obj_in=obj_in
    )


@router.delete(
    "/questions/{question_id}/options/{option_id}", response_model=MessageResponse
)
def delete_option(
    question_id: int,
    option_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_teacher),
):
    option = assignment_service.get_option_or_404(
        db, question_id=question_id, option_id=option_id
    )
    assignment_service.delete_option(db, principal=principal, db_obj=option)
    return MessageResponse(message="option deleted successfully")
