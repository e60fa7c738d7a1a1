"""
Response header policy for generated documents.
"""

from urllib.parse import quote

DYNAMIC_CONTENT_CACHE_SECONDS = 60


def dynamic_content_headers(cache_seconds: int = DYNAMIC_CONTENT_CACHE_SECONDS) -> dict:
    """Cache and content-negotiation headers for generated responses."""
    return {
        "Cache-Control": f"max-age={cache_seconds}",
        "Vary": "Accept-Encoding",
    }


def content_disposition(filename: str, ascii_fallback: str = "document") -> str:
    """Build an attachment Content-Disposition value.

    Non-ASCII names are sent as RFC 5987 ``filename*`` with an ASCII
    ``filename`` for older clients.
    """
    try:
        filename.encode("ascii")
    except UnicodeEncodeError:
        extension = filename.rsplit(".", 1)[-1] if "." in filename else ""
        fallback = f"{ascii_fallback}.{extension}" if extension else ascii_fallback
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"
    return f'attachment; filename="{filename}"'
