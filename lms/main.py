# lms/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from lms.api.endpoints import (
    assignments,
    auth,
    certificates,
    courses,
    departments,
    enrollments,
    health,
    payments,
    progress,
    questions,
    submissions,
    users,
)
from lms.core.config import settings
from lms.core.exceptions import LMSError, TokenError
from lms.core.logging_config import setup_logging
from lms.db.init_db import init_db

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    init_db()


def _error_body(message: str, code: str, details=None) -> dict:
    body = {"error": message, "code": code}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return body


@app.exception_handler(LMSError)
async def lms_error_handler(request: Request, exc: LMSError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, TokenError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.code, exc.details),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content=_error_body("invalid request", "invalid_request", exc.errors()),
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    details = str(exc) if settings.EXPOSE_ERROR_DETAILS else None
    return JSONResponse(
        status_code=500,
        content=_error_body("storage error", "storage_error", details),
    )


app.include_router(auth.router, prefix="/users", tags=["auth"])
app.include_router(users.router)
app.include_router(departments.router)
app.include_router(courses.router)
app.include_router(enrollments.router)
app.include_router(assignments.router)
app.include_router(questions.router)
app.include_router(submissions.router)
app.include_router(progress.router)
app.include_router(certificates.router)
app.include_router(payments.router)
app.include_router(health.router)
