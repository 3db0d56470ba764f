# lms/schemas/enrollment.py
from datetime import datetime

from pydantic import BaseModel, Field


class EnrollmentCreate(BaseModel):
    course_id: int


class EnrollmentUpdate(BaseModel):
    """Admin-only manual correction."""

    progress: float | None = Field(default=None, ge=0, le=100)
    status: str | None = Field(default=None, max_length=20)
    completed_at: datetime | None = None
    certificate_id: str | None = Field(default=None, max_length=100)


class EnrollmentPublic(BaseModel):
    id: int
    user_id: int
    course_id: int
    progress: float
    status: str
    enrolled_at: datetime | None = None
    completed_at: datetime | None = None
    certificate_id: str | None = None

    model_config = {"from_attributes": True}
