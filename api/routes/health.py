"""
Health check and system status endpoints.
"""

import shutil
import time

from fastapi import APIRouter, Request

from api.deps import conversion_config, start_time
from api.rate_limiter import limiter, rate_limit_config
from config.logging_config import get_logger
from config.settings import settings

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
@limiter.limit(rate_limit_config.get_limit("health"))
async def health_check(request: Request):
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.version,
        "timestamp": time.time(),
    }


@router.get("/api/system/status")
@limiter.limit(rate_limit_config.get_limit("status"))
async def get_system_status(request: Request):
    """
    Conversion readiness.

    Returns:
        Whether RTF conversion is enabled, whether a tool is configured and
        whether that tool resolves to an executable.
    """
    tool = conversion_config.tool
    tool_path = shutil.which(tool) if tool else None
    if conversion_config.enabled and tool and tool_path is None:
        logger.warning(f"Configured RTF converter {tool!r} not found on PATH")

    return {
        "version": settings.version,
        "uptime_seconds": time.time() - start_time,
        "conversion": {
            "rtf": {
                "enabled": conversion_config.enabled,
                "tool_configured": conversion_config.tool_configured,
                "tool": tool,
                "tool_available": tool_path is not None,
                "tool_path": tool_path,
                "timeout_seconds": conversion_config.timeout_seconds,
            },
        },
        "directories": {
            "content": str(settings.content_dir),
            "templates": str(settings.templates_dir),
            "temp": str(settings.temp_dir),
        },
    }
