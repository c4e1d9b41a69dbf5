"""Provider error classification and pre-network credential checks.

The provider exposes no structured error codes, so classification is a
first-match-wins substring heuristic over its free-text messages. It breaks
silently if the provider rewords a message.
"""

from __future__ import annotations

from app.identity.models import AuthError, AuthErrorKind, ValidationErrorKind

MIN_PASSWORD_LENGTH = 6
MIN_SIGNUP_PASSWORD_LENGTH = 8

WRONG_CREDENTIALS_PHRASES = (
    "invalid login credentials",
    "user not found",
    "invalid email or password",
)
USER_EXISTS_PHRASES = (
    "user already registered",
    "email address already exists",
    "user already exists",
)
WEAK_PASSWORD_HINTS = ("weak", "strength", "short")
NETWORK_HINTS = ("network", "connection")


class ProviderError(Exception):
    """Failure reported by the identity provider, carrying its free-text message."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def classify_error(message: str) -> AuthError:
    text = message.lower()

    if any(p in text for p in WRONG_CREDENTIALS_PHRASES):
        return AuthError.of(AuthErrorKind.wrong_credentials)
    if any(p in text for p in USER_EXISTS_PHRASES):
        return AuthError.of(AuthErrorKind.user_exists)
    if "password" in text and any(h in text for h in WEAK_PASSWORD_HINTS):
        return AuthError.of(AuthErrorKind.weak_password)
    if "email" in text:
        return AuthError.of(AuthErrorKind.invalid_email)
    if any(h in text for h in NETWORK_HINTS):
        return AuthError.of(AuthErrorKind.network_error)
    return AuthError.unknown(message)


def validate_locally(email: str, password: str, is_sign_up: bool) -> ValidationErrorKind | None:
    """Reject obviously bad input before any network call. None means valid."""
    if not email or "@" not in email:
        return ValidationErrorKind.invalid_email
    if len(password) < MIN_PASSWORD_LENGTH:
        return ValidationErrorKind.password_too_short
    if is_sign_up and len(password) < MIN_SIGNUP_PASSWORD_LENGTH:
        return ValidationErrorKind.password_too_weak
    return None
