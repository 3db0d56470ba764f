# lms/models/payment.py
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.sql import func

from lms.db.base import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )

    amount = Column(Float, nullable=False)  # after discount
    discount_applied = Column(Float, nullable=False, default=0.0)
    # pending / success / failed
    status = Column(String(20), nullable=False, default="pending")
    transaction_id = Column(String(100), unique=True, nullable=True)
    payment_method = Column(String(50), nullable=True)  # card, upi, ...

    created_at = Column(DateTime(timezone=True), server_default=func.now())
