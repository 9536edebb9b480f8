from __future__ import annotations

from .dependencies import require_bearer
from .errors import (
    AuthError,
    HumanVerificationError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
)
from .service import authenticate, login
from .tokens import issue_token, verify_token

__all__ = [
    "AuthError",
    "HumanVerificationError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "TokenExpiredError",
    "authenticate",
    "issue_token",
    "login",
    "require_bearer",
    "verify_token",
]
