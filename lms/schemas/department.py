# lms/schemas/department.py
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from lms.schemas.course import CourseSummary


class DepartmentBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    thumbnail_url: str | None = None


class DepartmentCreate(DepartmentBase):
    pass


class DepartmentUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    thumbnail_url: str | None = None


class DepartmentPublic(DepartmentBase):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class DepartmentDetail(DepartmentPublic):
    courses: List[CourseSummary] = []
