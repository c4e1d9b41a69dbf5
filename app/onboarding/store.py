"""Database connector — profile rows and workout preferences in `users`.

Table users: id (UUID, = auth user id), email, created_at, one text column per
questionnaire question, workout_preferences_updated_at (timestamptz).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.identity.models import User
from app.onboarding.models import WorkoutPreferences
from app.onboarding.questions import QUESTIONS

PREFERENCE_COLUMNS = [q.field for q in QUESTIONS]


class PreferencesNotSaved(Exception):
    """The users row for the given id does not exist."""


async def save_preferences(
    session: AsyncSession,
    user_id: uuid.UUID,
    record: WorkoutPreferences,
) -> None:
    params: dict = dict(record.to_columns())
    params["updated_at"] = datetime.now(timezone.utc)
    params["user_id"] = user_id
    assignments = ", ".join(f"{col} = :{col}" for col in PREFERENCE_COLUMNS)
    query = (
        f"UPDATE users SET {assignments}, "
        "workout_preferences_updated_at = :updated_at "
        "WHERE id = :user_id"
    )
    result = await session.execute(text(query), params)
    if result.rowcount == 0:
        await session.rollback()
        raise PreferencesNotSaved(f"No profile row for user {user_id}")
    await session.commit()


async def load_preferences(session: AsyncSession, user_id: uuid.UUID) -> WorkoutPreferences | None:
    """Stored preferences for a user, or None when the user row is missing."""
    query = f"SELECT {', '.join(PREFERENCE_COLUMNS)} FROM users WHERE id = :user_id"
    result = await session.execute(text(query), {"user_id": user_id})
    row = result.fetchone()
    if row is None:
        return None
    columns = result.keys()
    return WorkoutPreferences.from_columns(dict(zip(columns, row)))


async def ensure_profile(session: AsyncSession, user: User) -> bool:
    """Create the profile row if the signup trigger did not. True when a row exists."""
    query = (
        "INSERT INTO users (id, email, created_at) "
        "VALUES (:id, :email, :created_at) "
        "ON CONFLICT (id) DO NOTHING"
    )
    await session.execute(
        text(query),
        {"id": user.id, "email": user.email, "created_at": user.created_at},
    )
    await session.commit()
    return True
