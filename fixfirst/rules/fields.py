"""Audit data fields available to rule authors."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Final, Mapping, Sequence


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


# Result of resolving a path that does not exist in the audit data.
MISSING: Any = _Missing()


@dataclass(frozen=True)
class FieldInfo:
    type: str
    description: str

    def as_dict(self) -> dict[str, str]:
        return {"type": self.type, "description": self.description}


FIELD_CATALOG: Final[dict[str, FieldInfo]] = {
    "meta.title": FieldInfo("string", "Page title"),
    "meta.title.length": FieldInfo("number", "Page title length"),
    "meta.description": FieldInfo("string", "Meta description"),
    "meta.description.length": FieldInfo("number", "Meta description length"),
    "meta.keywords": FieldInfo("array", "Meta keywords"),
    "performance.score": FieldInfo("number", "Performance score (0-100)"),
    "performance.fcp": FieldInfo("number", "First Contentful Paint (ms)"),
    "performance.lcp": FieldInfo("number", "Largest Contentful Paint (ms)"),
    "performance.cls": FieldInfo("number", "Cumulative Layout Shift"),
    "performance.tti": FieldInfo("number", "Time to Interactive (ms)"),
    "accessibility.score": FieldInfo("number", "Accessibility score (0-100)"),
    "seo.score": FieldInfo("number", "SEO score (0-100)"),
    "images.count": FieldInfo("number", "Number of images"),
    "images.missingAlt": FieldInfo("number", "Images without alt text"),
    "links.internal": FieldInfo("number", "Internal links count"),
    "links.external": FieldInfo("number", "External links count"),
    "links.broken": FieldInfo("number", "Broken links count"),
    "content.headings.h1": FieldInfo("number", "H1 heading count"),
    "content.wordCount": FieldInfo("number", "Total word count"),
    "mobile.friendly": FieldInfo("boolean", "Mobile friendly"),
    "https.enabled": FieldInfo("boolean", "HTTPS enabled"),
    "structuredData.present": FieldInfo("boolean", "Structured data present"),
}


def available_fields() -> dict[str, dict[str, str]]:
    return {name: info.as_dict() for name, info in FIELD_CATALOG.items()}


_INDEX_RE = re.compile(r"0|[1-9][0-9]*")


def _step(current: Any, key: str) -> Any:
    if isinstance(current, Mapping):
        return current.get(key, MISSING)
    if isinstance(current, (str, Sequence)):
        if key == "length":
            return len(current)
        if _INDEX_RE.fullmatch(key):
            index = int(key)
            return current[index] if index < len(current) else MISSING
    return MISSING


def resolve_field_path(data: Any, path: str) -> Any:
    """Walk ``data`` along a dot-separated ``path``.

    Mappings are indexed by key and sequences by position; ``length`` on a
    string or sequence yields its size. Returns ``MISSING`` as soon as a step
    is absent or ``None`` and never raises.
    """
    current = data
    for key in path.split("."):
        if current is None or current is MISSING:
            return MISSING
        current = _step(current, key)
    return current
