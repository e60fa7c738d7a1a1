"""
Document download endpoint — ``GET /<route>.rtf``.

Catch-all route; include it after every other router.
"""

from fastapi import APIRouter, Depends, Request

from api.deps import get_rtf_handler
from api.rate_limiter import limiter, rate_limit_config
from api.services.conversion_handler import ConversionHandler

router = APIRouter(tags=["Conversion"])


@router.get("/{path:path}", include_in_schema=False)
@limiter.limit(rate_limit_config.get_limit("convert"))
async def convert_item(
    request: Request,
    path: str,
    handler: ConversionHandler = Depends(get_rtf_handler),
):
    """Download a content item converted to RTF."""
    if not handler.accepts(path):
        return await handler.fallback(request)
    return await handler.handle(request, path)
