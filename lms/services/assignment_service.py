# lms/services/assignment_service.py
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from lms.core.exceptions import (
    AssignmentNotFound,
    CorrectOptionExists,
    OptionNotFound,
    QuestionNotFound,
)
from lms.core.security import Principal
from lms.models.assignment import Assignment, Option, Question
from lms.schemas.assignment import (
    AssignmentCreate,
    AssignmentUpdate,
    OptionCreate,
    OptionUpdate,
    QuestionCreate,
    QuestionUpdate,
)
from lms.services.course_service import ensure_course_owner, get_course_or_404


def _with_tree(query):
    return query.options(selectinload(Assignment.questions).selectinload(Question.options))


# ---------- assignments ----------


def create_assignment(
    db: Session,
    *,
    principal: Principal,
    obj_in: AssignmentCreate,
) -> Assignment:
    course = get_course_or_404(db, obj_in.course_id)
    ensure_course_owner(principal, course)

    db_obj = Assignment(
        title=obj_in.title,
        description=obj_in.description,
        course_id=course.id,
        teacher_id=principal.user_id,
    )
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def get_assignment(db: Session, assignment_id: int) -> Optional[Assignment]:
    return _with_tree(db.query(Assignment)).filter(Assignment.id == assignment_id).first()


def get_assignment_or_404(db: Session, assignment_id: int) -> Assignment:
    assignment = get_assignment(db, assignment_id)
    if assignment is None:
        raise AssignmentNotFound(assignment_id)
    return assignment


def list_assignments(
    db: Session,
    *,
    course_id: int | None = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Assignment]:
    query = _with_tree(db.query(Assignment))
    if course_id is not None:
        query = query.filter(Assignment.course_id == course_id)
    return query.order_by(Assignment.id.asc()).offset(skip).limit(limit).all()


def update_assignment(
    db: Session,
    *,
    principal: Principal,
    db_obj: Assignment,
    obj_in: AssignmentUpdate,
) -> Assignment:
    ensure_course_owner(principal, get_course_or_404(db, db_obj.course_id))

    update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
    if "course_id" in update_data and update_data["course_id"] != db_obj.course_id:
        # moving it needs ownership of the target course too
        ensure_course_owner(principal, get_course_or_404(db, update_data["course_id"]))

    for field, value in update_data.items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def delete_assignment(db: Session, *, principal: Principal, db_obj: Assignment) -> None:
    ensure_course_owner(principal, get_course_or_404(db, db_obj.course_id))
    db.delete(db_obj)
    db.commit()


# ---------- questions ----------


def _ensure_assignment_owner(db: Session, principal: Principal, assignment_id: int) -> Assignment:
    assignment = db.get(Assignment, assignment_id)
    if assignment is None:
        raise AssignmentNotFound(assignment_id)
    ensure_course_owner(principal, get_course_or_404(db, assignment.course_id))
    return assignment


def create_question(
    db: Session,
    *,
    principal: Principal,
    assignment_id: int,
    obj_in: QuestionCreate,
) -> Question:
    assignment = _ensure_assignment_owner(db, principal, assignment_id)
    question = Question(assignment_id=assignment.id, text=obj_in.text)
    db.add(question)
    db.commit()
    db.refresh(question)
    return question


def list_questions(db: Session, *, assignment_id: int) -> List[Question]:
    if db.get(Assignment, assignment_id) is None:
        raise AssignmentNotFound(assignment_id)
    return (
        db.query(Question)
        .options(selectinload(Question.options))
        .filter(Question.assignment_id == assignment_id)
        .order_by(Question.id.asc())
        .all()
    )


def get_question_or_404(db: Session, question_id: int) -> Question:
    question = db.get(Question, question_id)
    if question is None:
        raise QuestionNotFound(question_id)
    return question


def update_question(
    db: Session,
    *,
    principal: Principal,
    db_obj: Question,
    obj_in: QuestionUpdate,
) -> Question:
    _ensure_assignment_owner(db, principal, db_obj.assignment_id)
    if obj_in.text:
        db_obj.text = obj_in.text
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def delete_question(db: Session, *, principal: Principal, db_obj: Question) -> None:
    _ensure_assignment_owner(db, principal, db_obj.assignment_id)
    db.delete(db_obj)
    db.commit()


# ---------- options ----------


def _ensure_single_correct(db: Session, question_id: int, exclude_id: int | None = None) -> None:
    query = db.query(Option).filter(
        Option.question_id == question_id, Option.is_correct.is_(True)
    )
    if exclude_id is not None:
        query = query.filter(Option.id != exclude_id)
    if query.first() is not None:
        raise CorrectOptionExists("question already has a correct option")


def create_option(
    db: Session,
    *,
    principal: Principal,
    question_id: int,
    obj_in: OptionCreate,
) -> Option:
    question = get_question_or_404(db, question_id)
    _ensure_assignment_owner(db, principal, question.assignment_id)
    if obj_in.is_correct:
        _ensure_single_correct(db, question.id)

    option = Option(question_id=question.id, text=obj_in.text, is_correct=obj_in.is_correct)
    db.add(option)
    db.commit()
    db.refresh(option)
    return option


def list_options(db: Session, *, question_id: int) -> List[Option]:
    get_question_or_404(db, question_id)
    return (
        db.query(Option)
        .filter(Option.question_id == question_id)
        .order_by(Option.id.asc())
        .all()
    )


def get_option_or_404(db: Session, *, question_id: int, option_id: int) -> Option:
    option = db.get(Option, option_id)
    if option is None or option.question_id != question_id:
        raise OptionNotFound(option_id)
    return option


def update_option(
    db: Session,
    *,
    principal: Principal,
    db_obj: Option,
    obj_in: OptionUpdate,
) -> Option:
    question = get_question_or_404(db, db_obj.question_id)
    _ensure_assignment_owner(db, principal, question.assignment_id)

    update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
    if update_data.get("is_correct"):
        _ensure_single_correct(db, question.id, exclude_id=db_obj.id)

    for field, value in update_data.items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def delete_option(db: Session, *, principal: Principal, db_obj: Option) -> None:
    question = get_question_or_404(db, db_obj.question_id)
    _ensure_assignment_owner(db, principal, question.assignment_id)
    db.delete(db_obj)
    db.commit()
