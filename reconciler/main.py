"""
Attendance Reconciler: application entry point.

This is the **only** file that assembles the app. Reconciliation logic
lives in `services/`; `api/` only parses requests and calls it.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reconciler.api.v1.api import api_router
from reconciler.core.config import settings
from reconciler.core.exceptions import register_exception_handlers
from reconciler.db.base import Base
from reconciler.db.session import engine

# Ensure all models are imported so metadata.create_all can see them
from reconciler.models.attendance import AttendanceRecord  # noqa: F401
from reconciler.models.employee import BiometricPunch, Employee  # noqa: F401
from reconciler.models.friday_policy import FridayPolicySettings  # noqa: F401
from reconciler.models.rules import Adjustment, SpecialRule  # noqa: F401

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Biometric attendance reconciliation and Friday leave policy",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_V1_PREFIX)
    return application


app = create_app()
