"""
Shared state and dependency getters for API route modules.

Module-level singletons built once from settings. Routes receive the
conversion handler through ``Depends(get_rtf_handler)`` so tests can swap it
via ``app.dependency_overrides``.
"""

import time

from config.logging_config import get_logger
from config.settings import settings
from core.conversion import (
    ConversionRenderer,
    DirectoryModelOrchestrator,
    TempFileManager,
    TemplateProvider,
)
from api.services.conversion_handler import RTF, ConversionHandler
from api.services.fallback import NotFoundResponder

logger = get_logger(__name__)

# --- Singletons ---

start_time = time.time()

conversion_config = settings.get_conversion_config()
temp_files = TempFileManager(settings.temp_dir)
template_provider = TemplateProvider(settings.templates_dir)
model_orchestrator = DirectoryModelOrchestrator(settings.content_dir)
not_found_responder = NotFoundResponder()

rtf_handler = ConversionHandler(
    config=conversion_config,
    orchestrator=model_orchestrator,
    renderer=ConversionRenderer(template_provider),
    temp_files=temp_files,
    fallback=not_found_responder,
    target=RTF,
)


def get_rtf_handler() -> ConversionHandler:
    return rtf_handler
