#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Rate Limiting Module for the Content Export Server

Conversion requests start an external process each, so they get a much
lower limit than health checks.

Usage:
    from api.rate_limiter import limiter, rate_limit_config

    @router.get("/{path:path}")
    @limiter.limit(rate_limit_config.get_limit("convert"))
    async def endpoint(request: Request, path: str):
        ...
"""

import os
import time
from dataclasses import dataclass, field
from typing import Callable, Dict

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address


@dataclass
class RateLimitConfig:
    """
    Centralized rate limit configuration.

    Limits are defined as "count/period", e.g. "10/minute".
    Override per category with RATE_LIMIT_<CATEGORY>=20/minute,
    or the fallback with RATE_LIMIT=...
    """

    defaults: Dict[str, str] = field(default_factory=lambda: {
        "health": "120/minute",
        "status": "60/minute",
        "convert": "10/minute",
        "default": "60/minute",
    })

    env_overrides: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Load overrides from environment variables."""
        for key in self.defaults.keys():
            env_key = f"RATE_LIMIT_{key.upper()}"
            if env_value := os.getenv(env_key):
                self.env_overrides[key] = env_value

        if global_limit := os.getenv("RATE_LIMIT"):
            self.env_overrides["default"] = global_limit

    def get_limit(self, endpoint: str) -> str:
        """Rate limit string for an endpoint category."""
        if endpoint in self.env_overrides:
            return self.env_overrides[endpoint]

        if endpoint in self.defaults:
            return self.defaults[endpoint]

        return self.env_overrides.get("default", self.defaults["default"])


rate_limit_config = RateLimitConfig()


def create_limiter(key_func: Callable = None, enabled: bool = None) -> Limiter:
    """
    Create a configured rate limiter instance.

    Args:
        key_func: Function to extract rate limit key from request
        enabled: Override for settings.rate_limit_enabled

    Returns:
        Configured Limiter instance
    """
    if enabled is None:
        from config.settings import settings
        enabled = settings.rate_limit_enabled

    limiter_kwargs = {
        "key_func": key_func or get_remote_address,
        "default_limits": [rate_limit_config.get_limit("default")],
        "enabled": enabled,
    }

    if redis_url := os.getenv("REDIS_URL"):
        limiter_kwargs["storage_uri"] = redis_url

    return Limiter(**limiter_kwargs)


limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """JSON 429 with a Retry-After header."""
    limit_value = str(exc.detail) if hasattr(exc, "detail") else "Rate limit exceeded"

    retry_after = 60
    if "second" in limit_value:
        retry_after = 1
    elif "hour" in limit_value:
        retry_after = 3600

    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "message": "Too many requests. Please slow down.",
            "detail": limit_value,
            "retry_after_seconds": retry_after,
            "timestamp": time.time(),
        },
        headers={
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": limit_value,
        },
    )
