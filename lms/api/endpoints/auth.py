# lms/api/endpoints/auth.py
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from lms.db.session import get_db
from lms.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    Token,
    VerifyEmailRequest,
)
from lms.services import registration_service
from lms.services.email_service import EmailSender, get_email_sender
from lms.services.pending_store import PendingRegistrationStore, get_pending_store

router = APIRouter()


@router.post("/register", response_model=MessageResponse)
def register_user(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    store: PendingRegistrationStore = Depends(get_pending_store),
    mailer: EmailSender = Depends(get_email_sender),
):
    # nothing is written to users until the code is verified
    registration_service.register(db, store=store, mailer=mailer, obj_in=payload)
    return MessageResponse(message="OTP sent, please verify email")


@router.post("/verify_email", response_model=MessageResponse)
def verify_email(
    payload: VerifyEmailRequest,
    db: Session = Depends(get_db),
    store: PendingRegistrationStore = Depends(get_pending_store),
):
    registration_service.verify_email(
        db, store=store, email=payload.email, code=payload.code
    )
    return MessageResponse(message="email verified successfully, user registered")


@router.post("/login", response_model=Token)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    token = registration_service.login(db, email=payload.email, password=payload.password)
    return Token(access_token=token)


# form variant for the "Authorize" button in the interactive docs
@router.post("/token", response_model=Token)
def login_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """
    OAuth2 password flow. Put the email address in ``username``.
    """
    token = registration_service.login(
        db, email=form_data.username, password=form_data.password
    )
    return Token(access_token=token)


@router.post("/forget_password", response_model=MessageResponse)
def forget_password(
    payload: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    mailer: EmailSender = Depends(get_email_sender),
):
    registration_service.forgot_password(db, mailer=mailer, email=payload.email)
    return MessageResponse(message="OTP sent to email")


@router.post("/reset_password", response_model=MessageResponse)
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    registration_service.reset_password(db, obj_in=payload)
    return MessageResponse(message="password reset successfully")
