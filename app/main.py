import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import settings
from app.identity.router import router as auth_router
from app.logging_config import setup_logging
from app.onboarding.router import router as onboarding_router
from app.services import build_services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    services, provider = build_services(settings)
    app.state.services = services
    services.worker.start()
    await services.tracker.start(services.launch_flag)
    logger.info("Nero started, auth phase: %s", services.tracker.phase.state.value)
    try:
        yield
    finally:
        await services.worker.stop()
        await provider.aclose()


app = FastAPI(title="Nero", version="0.1.0", lifespan=lifespan)
app.include_router(auth_router)
app.include_router(onboarding_router)


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "auth": {
            "phase": "/auth/phase",
            "validate": "/auth/validate",
            "sign_up": "/auth/sign-up",
            "sign_in": "/auth/sign-in",
            "sign_out": "/auth/sign-out",
            "restore": "/auth/restore",
            "oauth": "/auth/oauth/{provider}",
        },
        "onboarding": {
            "questions": "/onboarding/questions",
            "wizard": "/onboarding/wizard",
            "preferences": "/onboarding/preferences",
            "notifications": "/onboarding/notifications",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
