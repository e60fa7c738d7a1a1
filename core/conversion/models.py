"""
Conversion Models - Content Export Server

Read-only snapshots of content items handed to the conversion templates.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class ConversionModel:
    """Snapshot of a content item sufficient for rendering"""
    route: str  # Canonical route value, "" for the root item
    title: str
    level: int = 0  # 0 = root item
    type: str = "document"
    description: str = ""
    content: str = ""  # Pre-rendered HTML fragment
    children: Tuple["ConversionModel", ...] = field(default_factory=tuple)

    @property
    def is_root(self) -> bool:
        return self.level == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "route": self.route,
            "title": self.title,
            "level": self.level,
            "type": self.type,
            "description": self.description,
            "content": self.content,
            "children": [child.to_dict() for child in self.children],
        }
