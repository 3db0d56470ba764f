"""Application exceptions.

Services raise these instead of ``HTTPException`` so they stay usable outside a
request (workers, tests). ``lms.main`` turns them into JSON responses of the
form ``{"error": ..., "code": ..., "details": ...}``.
"""

from typing import Any


class ConfigurationError(Exception):
    """Raised at boot when required configuration is missing."""

    pass


class LMSError(Exception):
    """Base exception for all domain errors."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


# --- 400 ---


class ValidationFailed(LMSError):
    status_code = 400
    code = "invalid_request"


class EmailAlreadyRegistered(ValidationFailed):
    code = "email_exists"


class RegistrationNotFound(ValidationFailed):
    code = "registration_not_found"


class InvalidCode(ValidationFailed):
    code = "invalid_code"


class CodeExpired(ValidationFailed):
    code = "code_expired"


class DepartmentRequired(ValidationFailed):
    code = "department_required"


class DuplicateCourseCode(ValidationFailed):
    code = "duplicate_course_code"


class DuplicateEnrollment(ValidationFailed):
    code = "duplicate_enrollment"


class CourseNotCompleted(ValidationFailed):
    code = "course_not_completed"


class CorrectOptionExists(ValidationFailed):
    code = "correct_option_exists"


class InvalidCredentials(ValidationFailed):
    code = "invalid_credentials"


# --- 401 ---


class AuthenticationFailed(LMSError):
    status_code = 401
    code = "unauthenticated"


class TokenError(AuthenticationFailed):
    """Raised when a bearer token cannot be accepted.

    ``reason`` is one of ``missing_header``, ``malformed_header``,
    ``invalid_token``, ``expired`` or ``invalid_claims``.
    """

    def __init__(self, reason: str, message: str, details: Any = None):
        self.reason = reason
        self.code = reason
        super().__init__(message, details)


class EmailNotVerified(AuthenticationFailed):
    code = "email_not_verified"


class WrongPassword(AuthenticationFailed):
    code = "invalid_password"


# --- 403 ---


class Forbidden(LMSError):
    status_code = 403
    code = "forbidden"


class RoleForbidden(Forbidden):
    code = "role_forbidden"


class NotOwner(Forbidden):
    code = "not_owner"


class NotCourseOwner(NotOwner):
    code = "not_course_owner"


class TeacherProfileMissing(Forbidden):
    code = "teacher_profile_missing"


class DepartmentUnassigned(Forbidden):
    code = "department_unassigned"


class DepartmentMismatch(Forbidden):
    code = "department_mismatch"


class InvalidAdminToken(Forbidden):
    code = "invalid_admin_token"


# --- 404 ---


class NotFound(LMSError):
    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, entity_id: Any = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class UserNotFound(NotFound):
    code = "user_not_found"

    def __init__(self, entity_id: Any = None):
        super().__init__("user", entity_id)


class DepartmentNotFound(NotFound):
    code = "department_not_found"

    def __init__(self, entity_id: Any = None):
        super().__init__("department", entity_id)


class CourseNotFound(NotFound):
    code = "course_not_found"

    def __init__(self, entity_id: Any = None):
        super().__init__("course", entity_id)


class AssignmentNotFound(NotFound):
    code = "assignment_not_found"

    def __init__(self, entity_id: Any = None):
        super().__init__("assignment", entity_id)


class QuestionNotFound(NotFound):
    code = "question_not_found"

    def __init__(self, entity_id: Any = None):
        super().__init__("question", entity_id)


class OptionNotFound(NotFound):
    code = "option_not_found"

    def __init__(self, entity_id: Any = None):
        super().__init__("option", entity_id)


class EnrollmentNotFound(NotFound):
    code = "enrollment_not_found"

    def __init__(self, entity_id: Any = None):
        super().__init__("enrollment", entity_id)


class CertificateNotFound(NotFound):
    code = "certificate_not_found"

    def __init__(self, entity_id: Any = None):
        super().__init__("certificate", entity_id)


class ProfileNotFound(NotFound):
    code = "profile_not_found"

    def __init__(self, entity_id: Any = None):
        super().__init__("profile", entity_id)


# --- 500 ---


class ServiceFailure(LMSError):
    status_code = 500
    code = "internal_error"


class EmailDeliveryFailed(ServiceFailure):
    code = "email_delivery_failed"


class RegistrationCorrupt(ServiceFailure):
    code = "registration_corrupt"


class PasswordHashingFailed(ServiceFailure):
    code = "password_hashing_failed"


class CertificateCodeExhausted(ServiceFailure):
    code = "certificate_code_exhausted"


class AdminRegistrationDisabled(ServiceFailure):
    code = "admin_registration_disabled"
