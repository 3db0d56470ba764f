# lms/api/endpoints/payments.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.core.security import Principal, get_current_principal
from lms.db.session import get_db
from lms.schemas.payment import PaymentCreate, PaymentPublic
from lms.services import payment_service

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", response_model=PaymentPublic, status_code=status.HTTP_201_CREATED)
def create_payment(
    obj_in: PaymentCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return payment_service.create_payment(db, principal=principal, obj_in=obj_in)


@router.get("/me", response_model=List[PaymentPublic])
def list_my_payments(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return payment_service.list_for_user(db, user_id=principal.user_id)
