"""
Issue and validate signed session tokens.

Background:
    After a successful login the API hands the browser a JWT signed with the
    server secret. Every later request sends it back as
    ``Authorization: Bearer <token>``. Before trusting any claim we:

    1. Verify the signature (the token was issued by us).
    2. Check it hasn't expired (``exp``), with a small leeway.

    Only then do we rebuild the ``SessionRecord`` from the claims.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt

from .context import SessionRecord

logger = logging.getLogger(__name__)


class SessionTokenError(Exception):
    """Raised when a session token cannot be trusted. Do not log the token."""

    pass


class SessionTokenCodec:
    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        ttl_minutes: int = 480,
        leeway_seconds: int = 30,
    ) -> None:
        if not secret:
            raise ValueError("Session secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = timedelta(minutes=ttl_minutes)
        self._leeway = leeway_seconds

    def issue(self, session: SessionRecord, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = session.to_claims()
        claims.update({"iat": issued_at, "exp": issued_at + self.ttl, "type": "session"})
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> SessionRecord:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                leeway=self._leeway,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("Session token expired")
            raise SessionTokenError("Session expired") from e
        except jwt.InvalidTokenError as e:
            logger.info("Session token invalid: %s", type(e).__name__)
            raise SessionTokenError("Invalid session token") from e

        if payload.get("type") != "session":
            raise SessionTokenError("Invalid session token")
        try:
            return SessionRecord.from_claims(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise SessionTokenError("Invalid session token") from e

    def refresh(self, token: str, now: datetime | None = None) -> str:
        """Re-issue a still-valid token with a fresh expiry."""
        return self.issue(self.decode(token), now=now)
