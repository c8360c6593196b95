"""
Session records and the capability view derived from them.

This package has no dependency on other app packages (outage_admin.db,
outage_admin.security, etc.). Feed a SessionProvider with session states and
read the AuthorizationView from an AuthorizationDeriver, or call
derive_authorization() directly.
"""

from .authorization import AuthorizationDeriver, AuthorizationView, derive_authorization
from .context import SessionRecord, SessionState, SessionStatus
from .provider import SessionProvider
from .roles import Role
from .tokens import SessionTokenCodec, SessionTokenError

__all__ = [
    "AuthorizationDeriver",
    "AuthorizationView",
    "Role",
    "SessionProvider",
    "SessionRecord",
    "SessionState",
    "SessionStatus",
    "SessionTokenCodec",
    "SessionTokenError",
    "derive_authorization",
]
