"""
Fallback responders — what a handler answers when it cannot serve a request.
"""

from typing import Protocol

from fastapi import Request
from fastapi.responses import JSONResponse, Response


class FallbackResponder(Protocol):
    async def __call__(self, request: Request) -> Response:
        ...


class NotFoundResponder:
    """Plain 404 page."""

    async def __call__(self, request: Request) -> Response:
        return JSONResponse(
            status_code=404,
            content={"detail": f"Not found: {request.url.path}"},
        )
