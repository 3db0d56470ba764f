# lms/schemas/assignment.py
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class OptionCreate(BaseModel):
    text: str = Field(min_length=1)
    is_correct: bool = False


class OptionUpdate(BaseModel):
    text: str | None = Field(default=None, min_length=1)
    is_correct: bool | None = None


class OptionPublic(BaseModel):
    id: int
    question_id: int
    text: str
    is_correct: bool

    model_config = {"from_attributes": True}


class QuestionCreate(BaseModel):
    text: str = Field(min_length=1)


class QuestionUpdate(BaseModel):
    text: str | None = Field(default=None, min_length=1)


class QuestionPublic(BaseModel):
    id: int
    assignment_id: int
    text: str
    options: List[OptionPublic] = []

    model_config = {"from_attributes": True}


class AssignmentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    course_id: int


class AssignmentUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    course_id: int | None = None


class AssignmentPublic(BaseModel):
    id: int
    title: str
    description: str | None = None
    course_id: int
    teacher_id: int
    questions: List[QuestionPublic] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
