from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from outage_admin.models.user import User, UserStatus
from outage_admin.security.config import SecurityConfig
from outage_admin.security.passwords import verify_password
from outage_admin.session_auth import SessionRecord

logger = logging.getLogger(__name__)


def extract_bearer_token(request: Request, config: SecurityConfig) -> str | None:
    """
    Read ``Authorization: Bearer <token>``.

    Returns None when the header is absent; raises 400 when it is malformed.
    """

    header_name = config.auth.authorization_header
    bearer_prefix = config.auth.bearer_prefix

    raw = request.headers.get(header_name)
    if not raw:
        logger.info("Missing Authorization header path=%s method=%s", request.url.path, request.method)
        return None

    prefix = f"{bearer_prefix} "
    if not raw.startswith(prefix):
        logger.warning("Invalid Authorization header format path=%s method=%s", request.url.path, request.method)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {header_name}. Expected '{bearer_prefix} <token>'.",
        )

    token = raw[len(prefix) :].strip()
    if not token:
        logger.warning("Empty bearer token path=%s method=%s", request.url.path, request.method)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {header_name}. Missing token after '{bearer_prefix}'.",
        )

    return token


def load_user_by_employee_id(db: Session, employee_id: str) -> User | None:
    return db.execute(
        select(User)
        .where(User.employee_id == employee_id)
        .options(
            selectinload(User.work_center),
            selectinload(User.branch),
        )
    ).scalar_one_or_none()


def load_user_by_id(db: Session, user_id: int) -> User | None:
    return db.execute(
        select(User).where(User.id == user_id).options(selectinload(User.work_center), selectinload(User.branch))
    ).scalar_one_or_none()


def session_record_for(user: User) -> SessionRecord:
    return SessionRecord(
        user_id=user.id,
        employee_id=user.employee_id,
        full_name=user.full_name,
        email=user.email,
        role=user.role,
        work_center_id=user.work_center_id,
        work_center_name=user.work_center.name,
        branch_id=user.branch_id,
        branch_name=user.branch.short_name,
    )


def authenticate(db: Session, employee_id: str | None, password: str | None) -> SessionRecord:
    """Check credentials and build the session record for a login."""

    if not employee_id or not password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing employeeId or password")

    user = load_user_by_employee_id(db, employee_id)
    if user is None:
        logger.info("Login failed: unknown employee id")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    if not verify_password(password, user.password_hash):
        logger.info("Login failed: bad password user_id=%s", user.id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")

    if user.status is not UserStatus.ACTIVE:
        logger.info("Login refused: account %s user_id=%s", user.status.value, user.id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is not active")

    return session_record_for(user)


def reload_session(db: Session, session: SessionRecord) -> SessionRecord:
    """Rebuild a session from the current account row; the account must still exist and be ACTIVE."""

    user = load_user_by_id(db, session.user_id)
    if user is None:
        logger.info("Refresh refused: user_id=%s no longer exists", session.user_id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    if user.status is not UserStatus.ACTIVE:
        logger.info("Refresh refused: account %s user_id=%s", user.status.value, user.id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is not active")
    return session_record_for(user)

