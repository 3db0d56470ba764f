# lms/api/endpoints/certificates.py
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from lms.core.security import Principal, get_current_principal
from lms.db.session import get_db
from lms.schemas.certificate import CertificateIssueRequest, CertificatePublic
from lms.services import certificate_service
from lms.services.certificate_pdf import render_certificate_pdf

router = APIRouter(prefix="/certificates", tags=["certificates"])


@router.post("/issue", response_model=CertificatePublic, status_code=status.HTTP_201_CREATED)
def issue_certificate(
    payload: CertificateIssueRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return certificate_service.issue_certificate(
        db, principal=principal, user_id=payload.user_id, course_id=payload.course_id
    )


@router.get("/user/{user_id}", response_model=List[CertificatePublic])
def list_user_certificates(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return certificate_service.list_for_user(db, principal=principal, user_id=user_id)


# public: anyone holding the QR code can check it
@router.get("/verify/{code}", response_model=CertificatePublic)
def verify_certificate(code: str, db: Session = Depends(get_db)):
    return certificate_service.get_certificate_by_code(db, code)


@router.get("/download/{certificate_id}")
def download_certificate(
    certificate_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    cert = certificate_service.get_certificate_or_404(db, certificate_id)
    certificate_service.ensure_can_download(principal, cert)
    return Response(
        content=render_certificate_pdf(cert),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{cert.code}.pdf"'},
    )


@router.get("/{certificate_id}", response_model=CertificatePublic)
def get_certificate(
    certificate_id: int,
    db: Session = Depends(get_db),
    _principal: Principal = Depends(get_current_principal),
):
    return certificate_service.get_certificate_or_404(db, certificate_id)
