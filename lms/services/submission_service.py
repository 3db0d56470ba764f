# lms/services/submission_service.py
import logging
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session, selectinload

from lms.core.config import settings
from lms.core.exceptions import AssignmentNotFound, NotOwner
from lms.core.security import Principal
from lms.models.assignment import Assignment, Question
from lms.models.submission import Submission
from lms.models.user import Role
from lms.schemas.submission import SubmissionCreate

logger = logging.getLogger(__name__)


def score_answers(
    questions: Iterable[Question],
    answers: Dict[int, int],
    *,
    strict: bool = False,
) -> int:
    """Count questions whose selected option is the correct one.

    A question with no option flagged correct has ``None`` as its correct id.
    In the default mode an unanswered question, or one answered with option
    id 0, also reads as ``None`` and is therefore counted as correct.
    ``strict`` only credits a question that has a correct option and was
    answered with it.
    """
    score = 0
    for question in questions:
        correct = question.correct_option_id
        selected = answers.get(question.id)
        if strict:
            if correct is not None and selected == correct:
                score += 1
        elif (selected or None) == correct:
            score += 1
    return score


def create_submission(
    db: Session,
    *,
    principal: Principal,
    obj_in: SubmissionCreate,
) -> Submission:
    """Score and store one attempt. Each call adds a new row."""
    assignment = db.get(Assignment, obj_in.assignment_id)
    if assignment is None:
        raise AssignmentNotFound(obj_in.assignment_id)

    questions = (
        db.query(Question)
        .options(selectinload(Question.options))
        .filter(Question.assignment_id == assignment.id)
        .all()
    )
    score = score_answers(questions, obj_in.answers, strict=settings.STRICT_SCORING)

    submission = Submission(
        assignment_id=assignment.id,
        user_id=principal.user_id,
        score=score,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)

    if settings.AUTO_RECOMPUTE_PROGRESS:
        from lms.workers.queue import enqueue_progress_task

        job_id = enqueue_progress_task(principal.user_id, assignment.course_id)
        logger.info("Queued progress recompute job %s", job_id)

    return submission


def list_submissions_for_user(
    db: Session,
    *,
    principal: Principal,
    user_id: int,
    skip: int = 0,
    limit: int = 100,
) -> List[Submission]:
    if principal.role is Role.STUDENT and principal.user_id != user_id:
        raise NotOwner("students can only view their own submissions")
    return (
        db.query(Submission)
        .filter(Submission.user_id == user_id)
        .order_by(Submission.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_submissions_for_assignment(
    db: Session,
    *,
    assignment_id: int,
    skip: int = 0,
    limit: int = 100,
) -> List[Submission]:
    if db.get(Assignment, assignment_id) is None:
        raise AssignmentNotFound(assignment_id)
    return (
        db.query(Submission)
        .filter(Submission.assignment_id == assignment_id)
        .order_by(Submission.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
