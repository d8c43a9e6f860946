from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_DISALLOWED_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-+")


@dataclass(frozen=True)
class NormalizedTag:
    """A Hashnode tag reference: URL-safe slug plus display name."""

    slug: str
    name: str

    def as_input(self) -> dict[str, str]:
        return {"slug": self.slug, "name": self.name}


def slugify_tag(value: Any) -> str:
    s = str(value).strip().lower()
    s = _DISALLOWED_RE.sub("", s)
    s = _WHITESPACE_RE.sub("-", s)
    s = _HYPHENS_RE.sub("-", s)
    return s.strip("-")


def normalize_tags(values: Any) -> list[NormalizedTag]:
    """
    Convert raw front matter tags into Hashnode tag objects.

    Anything that is not a list/tuple yields an empty list. Tags whose slug ends up
    empty (e.g. "!!!") are dropped, so callers must check for an empty result.
    """
    if not isinstance(values, (list, tuple)):
        return []

    out: list[NormalizedTag] = []
    for raw in values:
        name = str(raw).strip()
        slug = slugify_tag(name)
        if not slug or not name:
            continue
        out.append(NormalizedTag(slug=slug, name=name))
    return out
