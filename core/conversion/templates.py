"""
Conversion templates - per-host Jinja2 lookup and rendering.

Lookup order for a host:
    <templates_dir>/<hostname>/conversion.html
    <templates_dir>/conversion.html
    built-in core/conversion/builtin_templates/conversion.html
"""

import re
import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, Template, TemplateError, TemplateNotFound

from config.logging_config import get_logger

from .exceptions import TemplateMissingError, TemplateRenderError
from .models import ConversionModel

logger = get_logger(__name__)

CONVERSION_TEMPLATE_NAME = "conversion.html"
BUILTIN_TEMPLATES_DIR = Path(__file__).parent / "builtin_templates"

_HOSTNAME_RE = re.compile(r"^[a-z0-9][a-z0-9.\-]*$")


class TemplateProvider:
    """Hands out Jinja2 templates, one cached environment per search path."""

    def __init__(self, templates_dir: Optional[Path] = None, use_builtin: bool = True):
        self.templates_dir = Path(templates_dir) if templates_dir else None
        self.use_builtin = use_builtin
        self._environments: Dict[Tuple[Path, ...], Environment] = {}
        self._lock = threading.Lock()

    def _search_path(self, hostname: str) -> list:
        paths = []
        if self.templates_dir is not None:
            if hostname and _HOSTNAME_RE.match(hostname) and ".." not in hostname:
                host_dir = self.templates_dir / hostname
                if host_dir.is_dir():
                    paths.append(host_dir)
            paths.append(self.templates_dir)
        if self.use_builtin:
            paths.append(BUILTIN_TEMPLATES_DIR)
        return paths

    def _environment(self, hostname: str) -> Environment:
        # Keyed on the search path, so hosts without their own directory share one.
        search_path = tuple(self._search_path(hostname))
        with self._lock:
            env = self._environments.get(search_path)
            if env is None:
                logger.debug("Template search path for %r: %s", hostname, list(search_path))
                loaders = [FileSystemLoader(str(p)) for p in search_path]
                env = Environment(loader=ChoiceLoader(loaders), autoescape=True)
                self._environments[search_path] = env
            return env

    def get_sub_template(self, hostname: str, name: str) -> Template:
        """Return template *name* for *hostname*.

        Raises:
            TemplateMissingError: If no search directory provides it.
            TemplateRenderError: If the template does not compile.
        """
        try:
            return self._environment(hostname).get_template(name)
        except TemplateNotFound as e:
            raise TemplateMissingError(hostname, name) from e
        except TemplateError as e:
            raise TemplateRenderError(f"Cannot load template {name!r} for host {hostname!r}: {e}") from e


class ConversionRenderer:
    """Renders conversion models into intermediate HTML."""

    def __init__(self, provider: TemplateProvider, template_name: str = CONVERSION_TEMPLATE_NAME):
        self.provider = provider
        self.template_name = template_name

    def render(self, hostname: str, model: ConversionModel) -> str:
        """Render *model* through the host's conversion template.

        Raises:
            TemplateMissingError: No conversion template for the host.
            TemplateRenderError: The template failed while rendering.
        """
        template = self.provider.get_sub_template(hostname, self.template_name)
        try:
            return template.render(model=model, hostname=hostname)
        except TemplateError as e:
            raise TemplateRenderError(
                f"Rendering {self.template_name!r} for item {model.route!r} failed: {e}"
            ) from e
