"""
Content routes — canonical slash-separated identifiers of content items.

A route is parsed from the request path after the output format suffix has
been stripped, e.g. ``docs/guide/install.rtf`` -> ``docs/guide/install``.
"""

import re
from typing import Tuple

from .exceptions import MalformedRouteError

_ILLEGAL_RE = re.compile(r'[<>:"|?*\x00-\x1f\x7f]')


def strip_format_suffix(path: str, token: str) -> str:
    """Remove a trailing format token, then a dangling dot.

    ``"a/b.rtf"`` and ``"a/brtf"`` both lose the token; only one dot is
    removed, mirroring how the suffix was appended.
    """
    if token and path.endswith(token):
        path = path[: -len(token)]
    if path.endswith("."):
        path = path[:-1]
    return path


class Route:
    """Immutable, normalized content route."""

    __slots__ = ("_components",)

    def __init__(self, components: Tuple[str, ...]):
        self._components = components

    @classmethod
    def from_request(cls, path: str) -> "Route":
        """Parse a request path.

        Raises:
            MalformedRouteError: On illegal characters or ``..`` segments.
        """
        if path is None:
            raise MalformedRouteError("", "path is missing")

        match = _ILLEGAL_RE.search(path)
        if match:
            raise MalformedRouteError(path, f"illegal character {match.group()!r}")

        components = []
        for segment in path.strip().replace("\\", "/").split("/"):
            segment = segment.strip()
            if segment in ("", "."):
                continue
            if segment == "..":
                raise MalformedRouteError(path, "parent directory segments are not allowed")
            components.append(segment)

        return cls(tuple(components))

    @classmethod
    def component(cls, name: str) -> "Route":
        """Parse a single route component (no separators)."""
        route = cls.from_request(name)
        if route.level > 1:
            raise MalformedRouteError(name, "expected a single route component")
        return route

    @property
    def components(self) -> Tuple[str, ...]:
        return self._components

    @property
    def value(self) -> str:
        return "/".join(self._components)

    @property
    def level(self) -> int:
        return len(self._components)

    @property
    def is_root(self) -> bool:
        return not self._components

    def last_component_name(self) -> str:
        return self._components[-1] if self._components else ""

    def __str__(self) -> str:
        return "/" + self.value

    def __repr__(self) -> str:
        return f"Route({self.value!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return self._components == other._components

    def __hash__(self) -> int:
        return hash(self._components)


def normalize_request_route(path: str, token: str) -> Route:
    """Strip the format token from a request path and parse the rest."""
    return Route.from_request(strip_format_suffix(path, token))
