# lms/schemas/progress.py
from pydantic import BaseModel


class ProgressUpdateRequest(BaseModel):
    user_id: int
    course_id: int


class ProgressResult(BaseModel):
    enrollment_id: int
    user_id: int
    course_id: int
    progress: float
    total: int
    completed: int


class ProgressPublic(BaseModel):
    user_id: int
    course_id: int
    progress: float
