# lms/schemas/user.py
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from lms.models.user import Role


class UserPublic(BaseModel):
    id: int
    name: str
    email: EmailStr
    role: Role
    is_verified: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    college: str = Field(min_length=1, max_length=100)
    student_id: str = Field(min_length=1, max_length=20)
    bio: str | None = None
    image: str | None = None


class ProfilePublic(BaseModel):
    id: int
    user_id: int
    college: str
    student_id: str
    bio: str | None = None
    image: str | None = None
    verified: bool

    model_config = {"from_attributes": True}


class TeacherProfileUpdate(BaseModel):
    # explicit null clears the department
    department_id: int | None = None
    bio: str | None = None
    experience: int | None = Field(default=None, ge=0)


class TeacherProfilePublic(BaseModel):
    id: int
    user_id: int
    department_id: int | None = None
    bio: str | None = None
    experience: int | None = None

    model_config = {"from_attributes": True}
