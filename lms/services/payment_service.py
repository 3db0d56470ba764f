# lms/services/payment_service.py
import logging
import uuid
from typing import List

from sqlalchemy.orm import Session

from lms.core.config import settings
from lms.core.security import Principal
from lms.models.payment import Payment
from lms.models.user import Profile
from lms.schemas.payment import PaymentCreate
from lms.services.course_service import get_course_or_404

logger = logging.getLogger(__name__)


def _discount_for(db: Session, user_id: int, amount: float) -> float:
    profile = db.query(Profile).filter(Profile.user_id == user_id).first()
    if profile is not None and profile.verified:
        return round(amount * settings.STUDENT_DISCOUNT_RATE, 2)
    return 0.0


def create_payment(db: Session, *, principal: Principal, obj_in: PaymentCreate) -> Payment:
    """Record a pending payment; verified students get the student discount."""
    course = get_course_or_404(db, obj_in.course_id)

    discount = _discount_for(db, principal.user_id, obj_in.amount)
    payment = Payment(
        user_id=principal.user_id,
        course_id=course.id,
        amount=round(obj_in.amount - discount, 2),
        discount_applied=discount,
        status="pending",
        transaction_id=f"TXN-{uuid.uuid4().hex}",
        payment_method=obj_in.payment_method,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)

    logger.info(
        "Payment %s recorded for user %s course %s (discount %.2f)",
        payment.transaction_id,
        principal.user_id,
        course.id,
        discount,
    )
    return payment


def list_for_user(db: Session, *, user_id: int) -> List[Payment]:
    return (
        db.query(Payment)
        .filter(Payment.user_id == user_id)
        .order_by(Payment.id.desc())
        .all()
    )
