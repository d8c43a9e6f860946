from __future__ import annotations

from typing import Any, Mapping

from .errors import ValidationError


def frontmatter_problems(metadata: Mapping[str, Any]) -> list[str]:
    """
    Return every problem with the required front matter fields.

    - title: a string that is non-empty after trimming
    - tags: a non-empty list of tags
    """
    problems: list[str] = []

    title = metadata.get("title")
    if not isinstance(title, str) or not title.strip():
        problems.append("Missing or invalid 'title' field")

    tags = metadata.get("tags")
    if not isinstance(tags, (list, tuple)) or len(tags) == 0:
        problems.append("Missing or invalid 'tags' field (must be a non-empty array)")

    return problems


def validate_frontmatter(metadata: Mapping[str, Any], filename: str) -> None:
    problems = frontmatter_problems(metadata)
    if problems:
        raise ValidationError(problems, filename=filename)
