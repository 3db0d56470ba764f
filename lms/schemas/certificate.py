# lms/schemas/certificate.py
from datetime import datetime

from pydantic import BaseModel


class CertificateIssueRequest(BaseModel):
    user_id: int
    course_id: int


class CertificatePublic(BaseModel):
    id: int
    user_id: int
    course_id: int
    code: str
    url: str | None = None
    issued_at: datetime | None = None

    model_config = {"from_attributes": True}
