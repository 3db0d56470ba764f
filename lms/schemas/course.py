# lms/schemas/course.py
from datetime import datetime

from pydantic import BaseModel, Field


class CourseBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    code: str = Field(min_length=1, max_length=50)
    description: str | None = None
    credits: int = Field(default=3, ge=1, le=10)


class CourseCreate(CourseBase):
    # teacher_id is never accepted from the client
    department_id: int


class CourseUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    code: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = None
    credits: int | None = Field(default=None, ge=1, le=10)
    department_id: int | None = None


class CourseSummary(CourseBase):
    id: int
    teacher_id: int
    department_id: int

    model_config = {"from_attributes": True}


class DepartmentRef(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class CoursePublic(CourseSummary):
    department: DepartmentRef | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
