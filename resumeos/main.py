import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from resumeos.api.v1.health import router as health_router
from resumeos.api.v1.settings import router as settings_router
from resumeos.api.v1.skill_gap import router as skill_gap_router
from resumeos.api.v1.tailor import router as tailor_router
from resumeos.api.v1.memory import router as memory_router
from resumeos.api.v1.analytics import router as analytics_router
from resumeos.core.cors import cors_allowed_origins
from resumeos.core.rate_limit import limiter
from resumeos.core.config import settings
from resumeos.core.lifespan import lifespan

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="ResumeOS API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(settings_router, prefix="/v1", tags=["Settings"])
app.include_router(skill_gap_router, prefix="/v1", tags=["Skill Gap"])
app.include_router(tailor_router, prefix="/v1", tags=["Tailor"])
app.include_router(memory_router, prefix="/v1", tags=["Memory"])
app.include_router(analytics_router, prefix="/v1", tags=["Analytics"])
