#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
FastAPI Web Server - Content Export Server.

Thin orchestration shell: app creation, middleware, router includes,
startup/shutdown (logging, converter probe, temp cleanup loop).

Usage:
    uvicorn api.main:app --host 0.0.0.0 --port 8000
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from config.logging_config import get_logger, setup_logging
from config.settings import settings

setup_logging(
    settings.log_level,
    settings.logs_dir / "server.log" if settings.log_to_file else None,
)
logger = get_logger(__name__)

from api.deps import conversion_config
from api.rate_limiter import limiter, rate_limit_exceeded_handler
from api.routes.health import router as health_router
from api.routes.conversion import router as conversion_router
from core.conversion import ConversionError, run_command

CLEANUP_INTERVAL_SECONDS = 6 * 3600


async def probe_converter() -> bool:
    """Run ``<tool> --version`` so the converter shows up in the startup log."""
    if not (conversion_config.enabled and conversion_config.tool_configured):
        return False
    try:
        await run_command(
            settings.temp_dir,
            f"{conversion_config.tool} --version",
            timeout_seconds=30,
        )
    except (ConversionError, ValueError) as e:
        logger.warning(f"RTF converter probe failed: {e}")
        return False
    logger.info(f"RTF converter {conversion_config.tool!r} is available")
    return True


async def _cleanup_loop():
    from core.services.file_cleanup import FileCleanupService

    while True:
        await asyncio.sleep(CLEANUP_INTERVAL_SECONDS)
        try:
            result = FileCleanupService().run_cleanup()
            logger.info(f"Scheduled cleanup: {result}")
        except OSError as e:
            logger.error(f"Scheduled cleanup failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info(
        f"{settings.app_name} v{settings.version} starting "
        f"(rtf conversion enabled={conversion_config.enabled}, "
        f"tool={conversion_config.tool or '-'})"
    )
    if settings.conversion_rtf_probe:
        await probe_converter()

    cleanup_task = asyncio.create_task(_cleanup_loop())
    yield

    cleanup_task.cancel()
    try:
        await cleanup_task
    except asyncio.CancelledError:
        pass
    logger.info("Shutting down...")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Serves content items as downloadable documents converted by an external tool",
    version=settings.version,
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# CORS middleware: origins from settings (env var) or dev defaults
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

app.add_middleware(SecurityHeadersMiddleware)

# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)

# Catch-all document route, must stay last
app.include_router(conversion_router)
