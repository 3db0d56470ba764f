# lms/schemas/payment.py
from datetime import datetime

from pydantic import BaseModel, Field


class PaymentCreate(BaseModel):
    course_id: int
    amount: float = Field(gt=0)
    payment_method: str | None = Field(default=None, max_length=50)


class PaymentPublic(BaseModel):
    id: int
    user_id: int
    course_id: int
    amount: float
    discount_applied: float
    status: str
    transaction_id: str | None = None
    payment_method: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
