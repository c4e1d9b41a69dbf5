"""Onboarding HTTP router — question catalog, wizard session, saved preferences."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import verify_api_key
from app.db import get_session
from app.onboarding import store
from app.onboarding.questions import describe_question, list_questions
from app.onboarding.wizard import InvalidAnswer, QuestionnaireWizard
from app.services import Services, get_services

router = APIRouter(prefix="/onboarding", tags=["onboarding"], dependencies=[Depends(verify_api_key)])


class AnswerBody(BaseModel):
    value: str


def _wizard(services: Services) -> QuestionnaireWizard:
    if services.wizard is None:
        raise HTTPException(status_code=404, detail="No questionnaire in progress")
    return services.wizard


# ---------------------------------------------------------------------------
# /onboarding/questions
# ---------------------------------------------------------------------------


@router.get("/questions")
async def questions() -> list[dict]:
    return [describe_question(q) for q in list_questions()]


# ---------------------------------------------------------------------------
# /onboarding/wizard
# ---------------------------------------------------------------------------


@router.post("/wizard")
async def open_wizard(services: Services = Depends(get_services)) -> dict:
    return services.open_wizard().snapshot()


@router.get("/wizard")
async def get_wizard(services: Services = Depends(get_services)) -> dict:
    return _wizard(services).snapshot()


@router.delete("/wizard")
async def cancel_wizard(services: Services = Depends(get_services)) -> dict:
    _wizard(services)
    services.wizard = None
    return {"status": "cancelled"}


@router.post("/wizard/advance")
async def advance(services: Services = Depends(get_services)) -> dict:
    wizard = _wizard(services)
    wizard.advance()
    snapshot = wizard.snapshot()
    if wizard.dismissed:
        services.wizard = None
    return snapshot


@router.post("/wizard/retreat")
async def retreat(services: Services = Depends(get_services)) -> dict:
    wizard = _wizard(services)
    wizard.retreat()
    return wizard.snapshot()


@router.put("/wizard/answers/{field}")
async def select_answer(
    field: str,
    body: AnswerBody,
    services: Services = Depends(get_services),
) -> dict:
    wizard = _wizard(services)
    try:
        wizard.select_single(field, body.value)
    except InvalidAnswer as e:
        raise HTTPException(status_code=422, detail=str(e))
    return wizard.snapshot()


@router.post("/wizard/answers/{field}/toggle")
async def toggle_answer(
    field: str,
    body: AnswerBody,
    services: Services = Depends(get_services),
) -> dict:
    wizard = _wizard(services)
    try:
        wizard.toggle_multi(field, body.value)
    except InvalidAnswer as e:
        raise HTTPException(status_code=422, detail=str(e))
    return wizard.snapshot()


# ---------------------------------------------------------------------------
# /onboarding/preferences, /onboarding/notifications
# ---------------------------------------------------------------------------


@router.get("/preferences")
async def get_preferences(
    services: Services = Depends(get_services),
    session: AsyncSession = Depends(get_session),
) -> dict:
    user = services.tracker.user
    if user is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    prefs = await store.load_preferences(session, user.id)
    if prefs is None:
        raise HTTPException(status_code=404, detail="No profile for current user")
    return prefs.model_dump(mode="json")


@router.get("/notifications")
async def notifications(services: Services = Depends(get_services)) -> dict:
    worker = services.worker
    return {
        "submitted": worker.submitted,
        "failures": [n.to_dict() for n in worker.notifications],
    }


@router.delete("/notifications")
async def clear_notifications(services: Services = Depends(get_services)) -> dict:
    services.worker.clear_notifications()
    return {"status": "cleared"}
