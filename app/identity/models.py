"""Auth state contract: user, phase and error taxonomy (Pydantic v2 models)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel


class User(BaseModel):
    """Local shape of an authenticated user. Equality is id + email."""

    id: uuid.UUID
    email: str = ""
    created_at: datetime

    @classmethod
    def from_provider(cls, payload: dict[str, Any]) -> User:
        """Normalize a provider user payload (GoTrue `user` object)."""
        created = payload.get("created_at") or datetime.now(timezone.utc)
        return cls(
            id=payload["id"],
            email=payload.get("email") or "",
            created_at=created,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.id == other.id and self.email == other.email

    def __hash__(self) -> int:
        return hash((self.id, self.email))


class AuthErrorKind(str, Enum):
    wrong_credentials = "wrong_credentials"
    user_exists = "user_exists"
    weak_password = "weak_password"
    invalid_email = "invalid_email"
    network_error = "network_error"
    unknown = "unknown"


class ValidationErrorKind(str, Enum):
    invalid_email = "invalid_email"
    password_too_short = "password_too_short"
    password_too_weak = "password_too_weak"


_DESCRIPTIONS: dict[AuthErrorKind, str] = {
    AuthErrorKind.user_exists: "Email already in use",
    AuthErrorKind.wrong_credentials: "Incorrect email or password",
    AuthErrorKind.weak_password: "Password too weak",
    AuthErrorKind.invalid_email: "Invalid email format",
    AuthErrorKind.network_error: "Network connection error",
}

_SUGGESTIONS: dict[AuthErrorKind, list[str]] = {
    AuthErrorKind.user_exists: [
        "Try signing in instead",
        "Use a different email address",
        "Reset your password if you forgot it",
    ],
    AuthErrorKind.wrong_credentials: [
        "Double-check your email and password",
        "Try creating an account if you don't have one",
        "Use 'Forgot Password' if you can't remember",
    ],
    AuthErrorKind.weak_password: [
        "Use at least 8 characters",
        "Include letters and numbers",
        "Add special characters for strength",
    ],
    AuthErrorKind.invalid_email: [
        "Make sure to include @ in your email",
        "Check for typos in your email address",
    ],
    AuthErrorKind.network_error: [
        "Check your internet connection",
        "Try again in a moment",
    ],
    AuthErrorKind.unknown: [
        "Try again in a moment",
        "Contact support if the problem persists",
    ],
}


class AuthError(BaseModel):
    kind: AuthErrorKind
    message: str | None = None  # only set for kind == unknown

    @classmethod
    def of(cls, kind: AuthErrorKind) -> AuthError:
        return cls(kind=kind)

    @classmethod
    def unknown(cls, message: str) -> AuthError:
        return cls(kind=AuthErrorKind.unknown, message=message)

    @property
    def description(self) -> str:
        if self.kind is AuthErrorKind.unknown:
            return self.message or ""
        return _DESCRIPTIONS[self.kind]

    @property
    def suggestions(self) -> list[str]:
        return list(_SUGGESTIONS[self.kind])


class PhaseState(str, Enum):
    idle = "idle"
    loading = "loading"
    succeeded = "succeeded"
    failed = "failed"


class AuthPhase(BaseModel):
    """Current state of an authentication attempt.

    `user` is set only when succeeded, `error` only when failed.
    """

    state: PhaseState
    user: User | None = None
    error: AuthError | None = None

    @classmethod
    def idle(cls) -> AuthPhase:
        return cls(state=PhaseState.idle)

    @classmethod
    def loading(cls) -> AuthPhase:
        return cls(state=PhaseState.loading)

    @classmethod
    def succeeded(cls, user: User) -> AuthPhase:
        return cls(state=PhaseState.succeeded, user=user)

    @classmethod
    def failed(cls, error: AuthError) -> AuthPhase:
        return cls(state=PhaseState.failed, error=error)

    def to_view(self) -> dict[str, Any]:
        """JSON payload for the UI, error copy included."""
        data = self.model_dump(mode="json")
        if self.error is not None:
            data["error"]["description"] = self.error.description
            data["error"]["suggestions"] = self.error.suggestions
        return data
