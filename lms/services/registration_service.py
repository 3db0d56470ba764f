# lms/services/registration_service.py
"""Register -> verify email -> login, plus password reset.

A registration is not written to the users table until its emailed code is
confirmed. Until then it lives in a ``PendingRegistrationStore``.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lms.core.config import settings
from lms.core.exceptions import (
    AdminRegistrationDisabled,
    CodeExpired,
    EmailAlreadyRegistered,
    EmailDeliveryFailed,
    EmailNotVerified,
    InvalidAdminToken,
    InvalidCode,
    InvalidCredentials,
    RegistrationCorrupt,
    RegistrationNotFound,
    UserNotFound,
    WrongPassword,
)
from lms.core.security import create_access_token, get_password_hash, verify_password
from lms.models.user import Role, User
from lms.schemas.auth import RegisterRequest, ResetPasswordRequest
from lms.services.email_service import EmailSender
from lms.services.pending_store import PendingRegistration, PendingRegistrationStore

logger = logging.getLogger(__name__)


def generate_otp(digits: int = 6) -> str:
    return f"{secrets.randbelow(10 ** digits):0{digits}d}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _check_admin_token(obj_in: RegisterRequest) -> None:
    if not settings.ADMIN_REGISTRATION_TOKEN:
        raise AdminRegistrationDisabled(
            "Admin registration is not configured. ADMIN_REGISTRATION_TOKEN not set."
        )
    if not obj_in.admin_token or not secrets.compare_digest(
        obj_in.admin_token.encode(), settings.ADMIN_REGISTRATION_TOKEN.encode()
    ):
        raise InvalidAdminToken("Invalid admin token")


def register(
    db: Session,
    *,
    store: PendingRegistrationStore,
    mailer: EmailSender,
    obj_in: RegisterRequest,
) -> PendingRegistration:
    """Stash the registration and email a one-time code.

    If the email cannot be delivered the pending entry is removed again and
    the registration fails.
    """
    email = obj_in.email.lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise EmailAlreadyRegistered("email already exists")

    if obj_in.role is Role.ADMIN:
        _check_admin_token(obj_in)

    code = generate_otp()
    entry = PendingRegistration(
        email=email,
        name=obj_in.name,
        role=obj_in.role,
        password=obj_in.password,
        code=code,
        expires_at=_utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
    )
    # replaces any earlier pending entry for this email
    store.put(entry)

    body = (
        f"Hello {obj_in.name},\n\n"
        f"Your OTP for email verification is: {code}\n"
        f"This OTP will expire in {settings.OTP_EXPIRE_MINUTES} minutes.\n\nThanks!"
    )
    try:
        mailer.send(email, "Verify Your Email - OTP", body)
    except EmailDeliveryFailed:
        store.delete(email)
        raise

    logger.info("Pending registration created for %s", email)
    return entry


def verify_email(
    db: Session,
    *,
    store: PendingRegistrationStore,
    email: str,
    code: str,
) -> User:
    email = email.lower()
    pending = store.get(email)
    if pending is None:
        raise RegistrationNotFound("user not found or not registered yet")

    # a wrong code leaves the entry in place for another attempt
    if not secrets.compare_digest(pending.code.encode(), code.encode()):
        raise InvalidCode("invalid OTP")
    if _utcnow() > _as_utc(pending.expires_at):
        raise CodeExpired("OTP has expired")

    if not pending.password:
        logger.error("Pending registration for %s has no password", email)
        raise RegistrationCorrupt("registration error: password data missing")

    user = User(
        name=pending.name,
        email=email,
        password_hash=get_password_hash(pending.password),
        role=pending.role,
        is_verified=True,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise EmailAlreadyRegistered("email already exists")
    db.refresh(user)

    store.delete(email)
    logger.info("User %s verified and stored (id=%s)", email, user.id)
    return user


def login(db: Session, *, email: str, password: str) -> str:
    user = db.query(User).filter(User.email == email.lower()).first()
    if user is None:
        raise InvalidCredentials("invalid email or password")
    if not user.is_verified:
        raise EmailNotVerified("email is not verified")
    if not verify_password(password, user.password_hash):
        raise WrongPassword("invalid password")
    return create_access_token(user.id, user.role)


def forgot_password(db: Session, *, mailer: EmailSender, email: str) -> None:
    user = db.query(User).filter(User.email == email.lower()).first()
    if user is None:
        raise UserNotFound()

    code = generate_otp()
    user.reset_code = code
    user.reset_expires_at = _utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)
    db.add(user)
    db.commit()

    body = (
        f"Hello {user.name},\n\n"
        f"Your OTP to reset your password is: {code}\n"
        f"This OTP will expire in {settings.OTP_EXPIRE_MINUTES} minutes.\n\nThanks!"
    )
    mailer.send(user.email, "Password Reset OTP", body)


def reset_password(db: Session, *, obj_in: ResetPasswordRequest) -> User:
    user = db.query(User).filter(User.email == obj_in.email.lower()).first()
    if user is None:
        raise InvalidCredentials("invalid email")

    if (
        not user.reset_code
        or user.reset_expires_at is None
        or not secrets.compare_digest(user.reset_code.encode(), obj_in.code.encode())
    ):
        raise InvalidCode("invalid or expired OTP")
    if _utcnow() > _as_utc(user.reset_expires_at):
        raise CodeExpired("invalid or expired OTP")

    user.password_hash = get_password_hash(obj_in.new_password)
    user.reset_code = None
    user.reset_expires_at = None
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
