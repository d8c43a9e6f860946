from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from frontmatter.default_handlers import YAMLHandler

from .errors import ParseError, ReadError, WriteBackError

# The body is everything after the closing delimiter line, byte for byte.
_OPEN_RE = re.compile(r"\A---[ \t]*\r?\n")
_CLOSE_RE = re.compile(r"^---[ \t]*(?:\r?\n|\Z)", re.MULTILINE)

_YAML = YAMLHandler()


@dataclass(frozen=True)
class MarkdownDocument:
    """Front matter mapping plus the Markdown body that follows it."""

    metadata: dict[str, Any] = field(default_factory=dict)
    content: str = ""


def split_front_matter(text: str) -> tuple[str | None, str]:
    """
    Split text into (raw YAML header, body).

    The header is None when the text does not open with a `---` line. The body is
    returned untouched so that leading indentation and trailing whitespace survive.
    """
    opening = _OPEN_RE.match(text)
    if opening is None:
        return None, text

    closing = _CLOSE_RE.search(text, opening.end())
    if closing is None:
        raise ValueError("front matter block is not closed with '---'")

    return text[opening.end() : closing.start()], text[closing.end() :]


def parse_markdown(text: str, filename: str) -> MarkdownDocument:
    try:
        header, body = split_front_matter(text)
        raw_metadata = _YAML.load(header) if header is not None else None
    except (yaml.YAMLError, ValueError) as e:
        raise ParseError(f"Failed to parse front matter: {e}", filename=filename) from e

    if raw_metadata is None:
        raw_metadata = {}
    if not isinstance(raw_metadata, dict):
        raise ParseError(
            f"Front matter must be a mapping, got {type(raw_metadata).__name__}",
            filename=filename,
        )

    return MarkdownDocument(metadata=dict(raw_metadata), content=body)


def read_markdown_file(path: Path) -> MarkdownDocument:
    try:
        with path.open("r", encoding="utf-8", newline="") as fp:
            text = fp.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(f"Failed to read file: {e}", filename=path.name) from e
    return parse_markdown(text, path.name)


def render_markdown(doc: MarkdownDocument) -> str:
    header = _YAML.export(dict(doc.metadata), sort_keys=False)
    return f"---\n{header}\n---\n{doc.content}"


def with_published_url(doc: MarkdownDocument, url: str) -> MarkdownDocument:
    metadata = dict(doc.metadata)
    metadata["publishedUrl"] = url
    return MarkdownDocument(metadata=metadata, content=doc.content)


def write_markdown_file(path: Path, doc: MarkdownDocument) -> None:
    text = render_markdown(doc)
    try:
        with path.open("w", encoding="utf-8", newline="") as fp:
            fp.write(text)
    except OSError as e:
        raise WriteBackError(
            f"Post was published but the URL could not be written back: {e}",
            filename=path.name,
        ) from e
