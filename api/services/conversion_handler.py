"""
Conversion request handler — serves ``<route>.rtf`` downloads.

Pipeline per request:
    route normalization -> config gates -> model lookup -> template render
    -> intermediate artifact -> external converter -> streamed download

Policy gates (conversion disabled, no tool, unknown item) answer with the
fallback responder. Hard failures are logged and answered with an error
status; a download is only started once the converter output is open.
"""

import os
from dataclasses import dataclass
from typing import IO, Iterator, Optional

from fastapi import HTTPException, Request
from fastapi.responses import Response, StreamingResponse
from starlette.background import BackgroundTask

from config.logging_config import get_logger
from config.settings import ConversionConfig
from core.conversion import (
    ArtifactIOError,
    ArtifactScope,
    ConversionError,
    ConversionModel,
    ConversionModelOrchestrator,
    ConversionRenderer,
    ConverterInvoker,
    MalformedRouteError,
    Route,
    TempFileManager,
    normalize_request_route,
)
from api.services.fallback import FallbackResponder
from api.services.headers import content_disposition, dynamic_content_headers

logger = get_logger(__name__)

STREAM_CHUNK_SIZE = 64 * 1024
FALLBACK_FILENAME = "document"


@dataclass(frozen=True)
class TargetFormat:
    """Output format served by a conversion handler."""
    token: str
    extension: str
    media_type: str
    intermediate_extension: str = "html"
    source_category: str = "html-source"
    target_category: str = "target"


RTF = TargetFormat(
    token="rtf",
    extension="rtf",
    media_type="application/rtf; charset=utf-8",
    target_category="rtf-target",
)


def derive_download_filename(
    model: ConversionModel, extension: str, fallback: str = FALLBACK_FILENAME
) -> str:
    """Download name for *model*.

    Nested items are named after their last route component, the root item
    after its title. Anything that does not parse as a single route
    component becomes *fallback*.
    """
    try:
        original_route = Route.from_request(model.route)
        if model.level == 0:
            base = Route.component(model.title)
        else:
            base = Route.component(original_route.last_component_name())
    except MalformedRouteError:
        return f"{fallback}.{extension}"

    if not base.value:
        return f"{fallback}.{extension}"
    return f"{base.value}.{extension}"


def get_hostname_from_request(request: Request) -> str:
    host = request.headers.get("host", "")
    if host.startswith("["):
        # IPv6 literal: [::1]:8000
        hostname = host[1:].split("]", 1)[0]
    else:
        hostname = host.split(":", 1)[0]
    if not hostname:
        hostname = request.url.hostname or "localhost"
    return hostname.strip().lower()


def iter_artifact(handle: IO[bytes], chunk_size: int = STREAM_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield *handle* in chunks, closing it afterwards."""
    try:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                break
            yield chunk
    finally:
        handle.close()


class ArtifactStreamingResponse(StreamingResponse):
    """Streams a converter output and releases its artifacts afterwards.

    Release happens when the ASGI call returns or raises, so a client that
    disconnects mid-download does not leave files behind. The background
    task covers servers that run it; ``release()`` is idempotent.
    """

    def __init__(self, content, artifacts: ArtifactScope, **kwargs):
        super().__init__(content, background=BackgroundTask(artifacts.release), **kwargs)
        self.artifacts = artifacts

    async def __call__(self, scope, receive, send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            self.artifacts.release()


class ConversionHandler:
    """Turns content items into downloads through an external converter."""

    def __init__(
        self,
        config: ConversionConfig,
        orchestrator: ConversionModelOrchestrator,
        renderer: ConversionRenderer,
        temp_files: TempFileManager,
        fallback: FallbackResponder,
        target: TargetFormat = RTF,
        invoker: Optional[ConverterInvoker] = None,
    ):
        self.config = config
        self.orchestrator = orchestrator
        self.renderer = renderer
        self.temp_files = temp_files
        self.fallback = fallback
        self.target = target
        self.invoker = invoker or ConverterInvoker(config.tool, config.timeout_seconds)

    def accepts(self, path: str) -> bool:
        """True if *path* asks for this handler's format."""
        return path == self.target.token or path.endswith(f".{self.target.token}")

    async def handle(self, request: Request, path: str) -> Response:
        try:
            request_route = normalize_request_route(path, self.target.token)
        except MalformedRouteError as e:
            logger.error("Unable to get route from request. Error: %s", e)
            raise HTTPException(status_code=400, detail="Malformed document path")

        fmt = self.target.extension.upper()

        if not self.config.enabled:
            logger.warning(
                "Cannot convert item %r to %s. %s conversion is disabled in the config.",
                str(request_route), fmt, fmt,
            )
            return await self.fallback(request)

        if not self.config.tool_configured:
            logger.warning(
                "Cannot convert item %r to %s. There is no %s conversion tool configured.",
                str(request_route), fmt, fmt,
            )
            return await self.fallback(request)

        hostname = get_hostname_from_request(request)
        try:
            model = self.orchestrator.get_conversion_model(hostname, request_route)
            if model is None:
                return await self.fallback(request)
            return await self._convert(hostname, model)
        except ConversionError as e:
            logger.error("Conversion of %r to %s failed: %s", str(request_route), fmt, e)
            raise HTTPException(
                status_code=500,
                detail=f"Conversion to {self.target.extension} failed",
            )

    async def _convert(self, hostname: str, model: ConversionModel) -> Response:
        html = self.renderer.render(hostname, model)

        with self.temp_files.scope(keep=self.config.keep_artifacts) as scope:
            source_path = scope.allocate(
                self.target.source_category, self.target.intermediate_extension
            )
            source_file = scope.open_for_read_write(source_path)
            try:
                source_file.write(html.encode("utf-8"))
            except OSError as e:
                raise ArtifactIOError(source_path, "write", e) from e
            finally:
                source_file.close()

            target_path = scope.allocate(self.target.target_category, self.target.extension)

            await self.invoker.convert(source_path, target_path)

            target_file = scope.open_for_reading(target_path)
            size = os.fstat(target_file.fileno()).st_size

            headers = dynamic_content_headers()
            headers["Content-Disposition"] = content_disposition(
                derive_download_filename(model, self.target.extension)
            )
            headers["Content-Length"] = str(size)

            response = ArtifactStreamingResponse(
                iter_artifact(target_file),
                scope,
                media_type=self.target.media_type,
                headers=headers,
            )
            scope.hand_off()
            return response
