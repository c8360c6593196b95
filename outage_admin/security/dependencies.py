from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status

from outage_admin.security.auth import extract_bearer_token
from outage_admin.security.config import SecurityConfig
from outage_admin.security.context import AuthzContext
from outage_admin.session_auth import (
    AuthorizationDeriver,
    AuthorizationView,
    SessionProvider,
    SessionRecord,
    SessionTokenCodec,
    SessionTokenError,
)

logger = logging.getLogger(__name__)


def get_security_config(request: Request) -> SecurityConfig:
    config = getattr(request.app.state, "security_config", None)
    if config is None:
        raise RuntimeError("Security config not loaded. Did app startup run?")
    return config


def get_session_codec(request: Request) -> SessionTokenCodec:
    codec = getattr(request.app.state, "session_codec", None)
    if codec is None:
        raise RuntimeError("Session codec not configured. Did app startup run?")
    return codec


def get_authorization(request: Request) -> AuthorizationView:
    authz: AuthzContext | None = getattr(request.state, "authz", None)
    if authz is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return authz.view


def get_current_session(request: Request) -> SessionRecord:
    session = getattr(request.state, "session", None)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return session


def _read_token(request: Request, config: SecurityConfig, auth_required: bool) -> str | None:
    # A malformed header on a public route is treated as no session at all.
    try:
        return extract_bearer_token(request, config)
    except HTTPException:
        if auth_required:
            raise
        return None


def enforce_security(
    request: Request,
    config: SecurityConfig = Depends(get_security_config),
    codec: SessionTokenCodec = Depends(get_session_codec),
) -> None:
    """
    Global security dependency (configuration-driven).

    Runs after routing, so decorator metadata on the endpoint is visible too.
    The session token is fed through a request-scoped SessionProvider; the
    AuthorizationDeriver attached to it produces the view stored on
    ``request.state.authz``.
    """

    path = request.url.path
    method = request.method.upper()

    rule = config.match(path, method)

    endpoint = request.scope.get("endpoint")
    decorator_roles = set(getattr(endpoint, "__security_required_roles__", set())) if endpoint else set()
    decorator_filter = bool(getattr(endpoint, "__security_filter_by_work_center__", False)) if endpoint else False

    auth_required = rule.auth_required or bool(decorator_roles) or decorator_filter
    filter_by_work_center = rule.filter_by_work_center or decorator_filter

    provider = SessionProvider()
    deriver = AuthorizationDeriver(provider)
    token_error: SessionTokenError | None = None
    try:
        token = _read_token(request, config, auth_required)
        if token is None:
            provider.sign_out()
        else:
            try:
                provider.sign_in(codec.decode(token))
            except SessionTokenError as exc:
                token_error = exc
                provider.sign_out()
        view = deriver.view
    finally:
        deriver.close()

    request.state.session = provider.state.session
    request.state.authz = AuthzContext(view=view, filter_by_work_center=filter_by_work_center)

    if not auth_required:
        return

    if not view.is_authenticated:
        detail = str(token_error) if token_error else "Authentication required"
        logger.info("Unauthenticated request rejected path=%s method=%s", path, method)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

    required_roles = set(rule.required_roles) | decorator_roles
    if required_roles and view.role.value not in required_roles:
        logger.info("Role %s rejected path=%s method=%s", view.role.value, path, method)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Insufficient role. Required one of: {sorted(required_roles)}",
        )
