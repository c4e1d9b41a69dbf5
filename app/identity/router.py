"""Auth HTTP router — phase reads and provider-backed transitions."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.auth import verify_api_key
from app.identity.errors import validate_locally
from app.services import Services, get_services

router = APIRouter(prefix="/auth", tags=["auth"], dependencies=[Depends(verify_api_key)])


class Credentials(BaseModel):
    email: str
    password: str


class ValidateRequest(Credentials):
    is_sign_up: bool = False


def _reject_invalid(body: Credentials, is_sign_up: bool) -> None:
    error = validate_locally(body.email, body.password, is_sign_up)
    if error is not None:
        raise HTTPException(status_code=422, detail={"error": error.value})


@router.get("/phase")
async def get_phase(services: Services = Depends(get_services)) -> dict:
    return services.tracker.phase.to_view()


@router.post("/validate")
async def validate(body: ValidateRequest) -> dict:
    error = validate_locally(body.email, body.password, body.is_sign_up)
    return {"valid": error is None, "error": error.value if error else None}


@router.post("/sign-up")
async def sign_up(body: Credentials, services: Services = Depends(get_services)) -> dict:
    _reject_invalid(body, is_sign_up=True)
    phase = await services.tracker.sign_up(body.email, body.password)
    return phase.to_view()


@router.post("/sign-in")
async def sign_in(body: Credentials, services: Services = Depends(get_services)) -> dict:
    _reject_invalid(body, is_sign_up=False)
    phase = await services.tracker.sign_in(body.email, body.password)
    return phase.to_view()


@router.post("/sign-out")
async def sign_out(services: Services = Depends(get_services)) -> dict:
    phase = await services.tracker.sign_out()
    return phase.to_view()


@router.post("/restore")
async def restore(services: Services = Depends(get_services)) -> dict:
    phase = await services.tracker.restore_session()
    return phase.to_view()


@router.post("/reset")
async def reset(services: Services = Depends(get_services)) -> dict:
    return services.tracker.reset_phase().to_view()


@router.get("/oauth/{provider}")
async def oauth(provider: str, services: Services = Depends(get_services)) -> dict:
    try:
        url = services.tracker.oauth_url(provider)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"provider": provider, "url": url}
