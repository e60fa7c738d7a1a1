"""
Conversion Module - Content Export Server

Turns content items into downloadable documents through an external
converter (pandoc or any tool accepting ``-s <input> -o <output>``).

Usage:
    from core.conversion import (
        ConversionRenderer, ConverterInvoker, TemplateProvider,
        TempFileManager, normalize_request_route,
    )

    route = normalize_request_route("guide/install.rtf", "rtf")
    html = ConversionRenderer(TemplateProvider(templates_dir)).render(host, model)
    await ConverterInvoker("pandoc").convert(source_path, target_path)
"""

from .exceptions import (
    ArtifactIOError,
    ContentReadError,
    ConversionError,
    ConverterExitError,
    ConverterLaunchError,
    ConverterTimeoutError,
    MalformedRouteError,
    TemplateMissingError,
    TemplateRenderError,
)
from .models import ConversionModel
from .route import Route, normalize_request_route, strip_format_suffix
from .orchestrator import (
    ConversionModelOrchestrator,
    DirectoryModelOrchestrator,
    InMemoryModelOrchestrator,
)
from .templates import CONVERSION_TEMPLATE_NAME, ConversionRenderer, TemplateProvider
from .temp_files import ArtifactScope, TempFileManager
from .invoker import ConverterInvoker, run_command

__all__ = [
    "ArtifactIOError",
    "ArtifactScope",
    "CONVERSION_TEMPLATE_NAME",
    "ContentReadError",
    "ConversionError",
    "ConversionModel",
    "ConversionModelOrchestrator",
    "ConversionRenderer",
    "ConverterExitError",
    "ConverterInvoker",
    "ConverterLaunchError",
    "ConverterTimeoutError",
    "DirectoryModelOrchestrator",
    "InMemoryModelOrchestrator",
    "MalformedRouteError",
    "Route",
    "TempFileManager",
    "TemplateMissingError",
    "TemplateProvider",
    "TemplateRenderError",
    "normalize_request_route",
    "run_command",
    "strip_format_suffix",
]
