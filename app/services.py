"""Process-wide service objects shared by the routers.

Built once in the app lifespan and stored on app.state; tests swap them via
dependency overrides on get_services.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError

from app.config import Settings
from app.db import async_session
from app.identity.launch import LaunchFlag
from app.identity.models import User
from app.identity.provider import GoTrueProvider, SessionStore
from app.identity.tracker import AuthTracker
from app.onboarding import store
from app.onboarding.models import WorkoutPreferences
from app.onboarding.wizard import QuestionnaireWizard
from app.onboarding.worker import SubmissionWorker

logger = logging.getLogger(__name__)


@dataclass
class Services:
    tracker: AuthTracker
    worker: SubmissionWorker
    launch_flag: LaunchFlag
    wizard: QuestionnaireWizard | None = None

    def open_wizard(self) -> QuestionnaireWizard:
        """Start a fresh questionnaire, discarding any unfinished one."""
        self.wizard = QuestionnaireWizard(on_complete=self._hand_off)
        return self.wizard

    def _hand_off(self, record: WorkoutPreferences) -> None:
        user = self.tracker.user
        self.worker.enqueue(record, user.id if user else None)


async def ensure_profile(user: User) -> bool:
    try:
        async with async_session() as session:
            return await store.ensure_profile(session, user)
    except SQLAlchemyError as e:
        logger.warning("Could not ensure profile for %s: %s", user.email or user.id, e)
        return False


async def submit_preferences(user_id, record: WorkoutPreferences) -> None:
    async with async_session() as session:
        await store.save_preferences(session, user_id, record)


def build_services(cfg: Settings) -> tuple[Services, GoTrueProvider]:
    if not cfg.is_supabase_configured():
        raise RuntimeError(
            "Supabase is not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY in the environment or .env."
        )
    provider = GoTrueProvider(
        cfg.supabase_url,
        cfg.supabase_anon_key,
        SessionStore(cfg.session_file),
        timeout=cfg.http_timeout_s,
    )
    tracker = AuthTracker(
        provider,
        ensure_profile=ensure_profile,
        oauth_redirect_url=cfg.oauth_redirect_url,
        signup_profile_delay_s=cfg.signup_profile_delay_s,
    )
    worker = SubmissionWorker(submit_preferences, notifications_limit=cfg.notifications_limit)
    services = Services(tracker=tracker, worker=worker, launch_flag=LaunchFlag(cfg.launch_flag_file))
    return services, provider


def get_services(request: Request) -> Services:
    return request.app.state.services
