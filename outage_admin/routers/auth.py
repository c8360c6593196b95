from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from outage_admin.db.session import get_db
from outage_admin.schemas.auth import LoginIn, TokenOut
from outage_admin.security.auth import authenticate, extract_bearer_token, reload_session
from outage_admin.security.dependencies import get_security_config, get_session_codec
from outage_admin.security.config import SecurityConfig
from outage_admin.session_auth import (
    SessionState,
    SessionTokenCodec,
    SessionTokenError,
    derive_authorization,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_out(codec: SessionTokenCodec, token: str) -> TokenOut:
    session = codec.decode(token)
    view = derive_authorization(SessionState.authenticated(session))
    return TokenOut(
        access_token=token,
        expires_in=int(codec.ttl.total_seconds()),
        authorization=view.to_dict(),
    )


@router.post("/login", response_model=TokenOut)
def login(
    body: LoginIn,
    db: Session = Depends(get_db),
    codec: SessionTokenCodec = Depends(get_session_codec),
) -> TokenOut:
    session = authenticate(db, body.employee_id, body.password)
    return _token_out(codec, codec.issue(session))


@router.post("/refresh", response_model=TokenOut)
def refresh(
    request: Request,
    db: Session = Depends(get_db),
    config: SecurityConfig = Depends(get_security_config),
    codec: SessionTokenCodec = Depends(get_session_codec),
) -> TokenOut:
    token = extract_bearer_token(request, config)
    if token is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    try:
        current = codec.decode(token)
    except SessionTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    # Role, scope and account status come from the database, not the old claims.
    return _token_out(codec, codec.issue(reload_session(db, current)))


@router.get("/session")
def current_session(request: Request) -> dict[str, Any]:
    # Public route: unauthenticated callers get the all-false view.
    return request.state.authz.view.to_dict()
