# lms/core/security.py
"""Password hashing, session tokens and the request access guard.

A token carries ``user_id``, ``role`` and ``exp``. ``get_current_principal``
validates it and binds a :class:`Principal` onto ``request.state``;
``require_roles`` narrows an endpoint to an allow-list of roles.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Header, Request
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from lms.core.config import settings
from lms.core.exceptions import (
    AuthenticationFailed,
    PasswordHashingFailed,
    RoleForbidden,
    TokenError,
)
from lms.db.session import get_db
from lms.models.user import Role, User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class Principal:
    user_id: int
    role: Role

    @property
    def is_staff(self) -> bool:
        return self.role in (Role.TEACHER, Role.ADMIN)


# ---------- passwords ----------


def get_password_hash(password: str) -> str:
    try:
        return pwd_context.hash(password)
    except (ValueError, TypeError) as e:
        raise PasswordHashingFailed("failed to hash password", details=str(e))


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(plain_password, password_hash)
    except (ValueError, TypeError):
        # unknown / corrupt hash format
        return False


# ---------- tokens ----------


def create_access_token(
    user_id: int,
    role: Role,
    expires_delta: timedelta | None = None,
    *,
    secret: str | None = None,
) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    claims = {"user_id": user_id, "role": Role(role).value, "exp": expire}
    return jwt.encode(claims, secret or settings.JWT_SECRET, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Principal:
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.ALGORITHM],
            options={"require_exp": True},
        )
    except ExpiredSignatureError:
        raise TokenError("expired", "Token has expired")
    except JWTClaimsError as e:
        raise TokenError("invalid_claims", "Token claims are invalid", details=str(e))
    except JWTError as e:
        raise TokenError("invalid_token", "Invalid token", details=str(e))

    user_id = payload.get("user_id")
    # bool is an int subclass; reject it explicitly
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise TokenError(
            "invalid_claims", "Token claim 'user_id' is missing or invalid format"
        )

    raw_role = payload.get("role")
    if not isinstance(raw_role, str):
        raise TokenError(
            "invalid_claims", "Token claim 'role' is missing or invalid format"
        )
    try:
        role = Role(raw_role)
    except ValueError:
        raise TokenError("invalid_claims", f"Token claim 'role' is unknown: {raw_role}")

    return Principal(user_id=user_id, role=role)


# ---------- request guard ----------


def _extract_bearer(authorization: str | None) -> str:
    if not authorization:
        raise TokenError("missing_header", "Authorization header missing")
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise TokenError(
            "malformed_header",
            "Invalid Authorization header format. Must be 'Bearer <token>'",
        )
    return parts[1]


def get_current_principal(
    request: Request,
    authorization: str | None = Header(default=None),
) -> Principal:
    try:
        principal = decode_access_token(_extract_bearer(authorization))
    except TokenError as e:
        logger.info("Rejected request to %s: %s", request.url.path, e.reason)
        raise
    request.state.principal = principal
    return principal


def require_roles(*roles: Role):
    allowed = frozenset(Role(r) for r in roles)

    def _role_gate(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            raise RoleForbidden(
                "Forbidden: insufficient permissions",
                details={
                    "role": principal.role.value,
                    "allowed": sorted(r.value for r in allowed),
                },
            )
        return principal

    return _role_gate


get_current_student = require_roles(Role.STUDENT)
get_current_teacher = require_roles(Role.TEACHER, Role.ADMIN)
get_current_admin = require_roles(Role.ADMIN)


def get_current_user(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> User:
    user = db.get(User, principal.user_id)
    if user is None:
        raise AuthenticationFailed("User not found")
    return user
