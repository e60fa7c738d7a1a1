"""
Conversion model orchestrators.

The request handler only needs ``get_conversion_model(hostname, route)``.
Two implementations ship with the server: an in-memory index (tests,
embedding) and a directory-backed one used by the application.

Directory layout for ``DirectoryModelOrchestrator``::

    content/
        content.html          # root item (level 0)
        meta.json             # optional: {"title": ..., "description": ..., "type": ...}
        guide/
            content.html      # route "guide" (level 1)
            install/
                content.html  # route "guide/install" (level 2)
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from config.logging_config import get_logger

from .exceptions import ContentReadError, MalformedRouteError
from .models import ConversionModel
from .route import Route

logger = get_logger(__name__)

CONTENT_FILE = "content.html"
META_FILE = "meta.json"
ROOT_TITLE = "Home"


class ConversionModelOrchestrator(ABC):
    """Resolves routes to conversion models."""

    @abstractmethod
    def get_conversion_model(self, hostname: str, route: Route) -> Optional[ConversionModel]:
        """Return the model for *route*, or None if no such item exists.

        Raises:
            ContentReadError: The item exists but cannot be read.
        """
        pass


class InMemoryModelOrchestrator(ConversionModelOrchestrator):
    """Models registered up front, keyed by route value."""

    def __init__(self):
        self._models: Dict[str, ConversionModel] = {}

    def add(self, model: ConversionModel) -> None:
        route = Route.from_request(model.route)
        self._models[route.value] = model

    def get_conversion_model(self, hostname: str, route: Route) -> Optional[ConversionModel]:
        return self._models.get(route.value)


class DirectoryModelOrchestrator(ConversionModelOrchestrator):
    """Reads items from a content directory tree."""

    def __init__(self, content_dir: Path):
        self.content_dir = Path(content_dir)

    def get_conversion_model(self, hostname: str, route: Route) -> Optional[ConversionModel]:
        item_dir = self.content_dir.joinpath(*route.components)
        if not (item_dir / CONTENT_FILE).is_file():
            logger.debug("No content item at %s", item_dir)
            return None
        return self._load(item_dir, route)

    def _load(self, item_dir: Path, route: Route) -> ConversionModel:
        meta = self._read_meta(item_dir)
        default_title = ROOT_TITLE if route.is_root else route.last_component_name()

        try:
            child_dirs = sorted(p for p in item_dir.iterdir() if p.is_dir())
        except OSError as e:
            raise ContentReadError(item_dir, e) from e

        children = []
        for child_dir in child_dirs:
            if child_dir.is_symlink():
                logger.warning("Skipping symlinked content directory %s", child_dir)
                continue
            if not (child_dir / CONTENT_FILE).is_file():
                continue
            try:
                child_route = Route.from_request(f"{route.value}/{child_dir.name}")
            except MalformedRouteError as e:
                logger.warning("Skipping content directory %s: %s", child_dir, e)
                continue
            children.append(self._load(child_dir, child_route))

        content_path = item_dir / CONTENT_FILE
        try:
            content = content_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ContentReadError(content_path, e) from e

        return ConversionModel(
            route=route.value,
            title=str(meta.get("title") or default_title),
            level=route.level,
            type=str(meta.get("type") or "document"),
            description=str(meta.get("description") or ""),
            content=content,
            children=tuple(children),
        )

    def _read_meta(self, item_dir: Path) -> dict:
        meta_path = item_dir / META_FILE
        if not meta_path.is_file():
            return {}
        try:
            data = json.loads(meta_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable %s: %s", meta_path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", meta_path)
            return {}
        return data
