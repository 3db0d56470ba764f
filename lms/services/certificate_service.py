# lms/services/certificate_service.py
"""Certificate issuance.

A certificate can only be minted once the enrollment reaches 100%. Codes look
like ``CERT-2025-004217``; the six-digit space is small enough that
collisions are expected eventually, so issuance retries with a fresh code.
"""
import logging
import secrets
from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from lms.core.config import settings
from lms.core.exceptions import (
    CertificateCodeExhausted,
    CertificateNotFound,
    CourseNotCompleted,
    EnrollmentNotFound,
    NotOwner,
)
from lms.core.security import Principal
from lms.models.certificate import Certificate
from lms.services.enrollment_service import get_enrollment
from lms.services.progress_service import ensure_can_view

logger = logging.getLogger(__name__)

COMPLETION_THRESHOLD = 100.0


def generate_certificate_code(now: datetime | None = None) -> str:
    year = (now or datetime.now(timezone.utc)).year
    return f"CERT-{year}-{secrets.randbelow(1_000_000):06d}"


def verification_url(code: str) -> str:
    return f"{settings.CERTIFICATE_VERIFY_BASE_URL.rstrip('/')}/{code}"


def _code_taken(db: Session, code: str) -> bool:
    return db.query(Certificate.id).filter(Certificate.code == code).first() is not None


def issue_certificate(
    db: Session,
    *,
    principal: Principal,
    user_id: int,
    course_id: int,
    code_factory: Callable[[], str] = generate_certificate_code,
) -> Certificate:
    ensure_can_view(principal, user_id)

    enrollment = get_enrollment(db, user_id=user_id, course_id=course_id)
    if enrollment is None:
        raise EnrollmentNotFound()
    if enrollment.progress < COMPLETION_THRESHOLD:
        raise CourseNotCompleted("course not completed, certificate cannot be issued")

    if settings.CERTIFICATE_REISSUE_RETURNS_EXISTING:
        existing = (
            db.query(Certificate)
            .filter(Certificate.user_id == user_id, Certificate.course_id == course_id)
            .order_by(Certificate.id.asc())
            .first()
        )
        if existing is not None:
            return existing

    for attempt in range(1, settings.CERTIFICATE_CODE_ATTEMPTS + 1):
        code = code_factory()
        if _code_taken(db, code):
            logger.warning("Certificate code collision on attempt %d", attempt)
            continue

        now = datetime.now(timezone.utc)
        cert = Certificate(
            user_id=user_id,
            course_id=course_id,
            code=code,
            url=verification_url(code),
            issued_at=now,
        )
        db.add(cert)
        # certificate and enrollment completion commit together
        enrollment.status = "completed"
        if enrollment.completed_at is None:
            enrollment.completed_at = now
        enrollment.certificate_id = code
        db.add(enrollment)

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning("Certificate code %s taken concurrently, retrying", code)
            continue

        db.refresh(cert)
        logger.info(
            "Issued certificate %s to user %s for course %s", code, user_id, course_id
        )
        return cert

    raise CertificateCodeExhausted("could not allocate a unique certificate code")


def get_certificate(db: Session, certificate_id: int) -> Optional[Certificate]:
    return (
        db.query(Certificate)
        .options(joinedload(Certificate.user), joinedload(Certificate.course))
        .filter(Certificate.id == certificate_id)
        .first()
    )


def get_certificate_or_404(db: Session, certificate_id: int) -> Certificate:
    cert = get_certificate(db, certificate_id)
    if cert is None:
        raise CertificateNotFound(certificate_id)
    return cert


def get_certificate_by_code(db: Session, code: str) -> Certificate:
    cert = db.query(Certificate).filter(Certificate.code == code).first()
    if cert is None:
        raise CertificateNotFound(code)
    return cert


def list_for_user(db: Session, *, principal: Principal, user_id: int) -> List[Certificate]:
    ensure_can_view(principal, user_id)
    return (
        db.query(Certificate)
        .filter(Certificate.user_id == user_id)
        .order_by(Certificate.id.asc())
        .all()
    )


def ensure_can_download(principal: Principal, cert: Certificate) -> None:
    if not principal.is_staff and cert.user_id != principal.user_id:
        raise NotOwner("you can only download your own certificates")
