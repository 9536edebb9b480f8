from __future__ import annotations


class AuthError(Exception):
    """Base exception for login and bearer-token checks."""


class InvalidCredentialsError(AuthError):
    pass


class HumanVerificationError(AuthError):
    pass


class InvalidTokenError(AuthError):
    pass


class TokenExpiredError(InvalidTokenError):
    pass
