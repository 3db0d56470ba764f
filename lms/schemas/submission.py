# lms/schemas/submission.py
from datetime import datetime
from typing import Dict

from pydantic import BaseModel


class SubmissionCreate(BaseModel):
    assignment_id: int
    # question_id -> selected option_id
    answers: Dict[int, int] = {}


class SubmissionPublic(BaseModel):
    id: int
    assignment_id: int
    user_id: int
    score: int
    submitted_at: datetime | None = None

    model_config = {"from_attributes": True}
