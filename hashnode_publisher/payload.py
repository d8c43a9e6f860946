from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal, Mapping, Sequence

from .config_schema import PostStatus
from .post_id import extract_post_id
from .tags import NormalizedTag

Operation = Literal["publish", "update"]
Enricher = Callable[[Mapping[str, Any]], "dict[str, Any] | None"]


@dataclass(frozen=True)
class PostRequest:
    """One GraphQL mutation call: the operation and its `input` variable."""

    operation: Operation
    input: dict[str, Any]


@dataclass(frozen=True)
class RequestPlan:
    request: PostRequest
    post_id: str | None = None
    fallback_reason: str | None = None

    @property
    def is_update(self) -> bool:
        return self.request.operation == "update"


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def republished_from(metadata: Mapping[str, Any]) -> dict[str, Any] | None:
    canonical = metadata.get("canonicalUrl")
    if not canonical:
        return None
    return {"isRepublished": {"originalArticleURL": canonical}}


def cover_image(metadata: Mapping[str, Any]) -> dict[str, Any] | None:
    image = metadata.get("coverImage")
    if not image:
        return None
    return {"coverImageOptions": {"coverImageURL": image}}


OPTIONAL_ENRICHERS: tuple[Enricher, ...] = (republished_from, cover_image)


def _base_input(
    metadata: Mapping[str, Any],
    content: str,
    tags: Sequence[NormalizedTag],
) -> dict[str, Any]:
    return {
        "title": str(metadata.get("title") or "").strip(),
        "subtitle": _optional_text(metadata.get("subtitle")),
        "contentMarkdown": content,
        "tags": [t.as_input() for t in tags],
    }


def _apply_enrichers(payload: dict[str, Any], metadata: Mapping[str, Any]) -> dict[str, Any]:
    for enrich in OPTIONAL_ENRICHERS:
        extra = enrich(metadata)
        if extra:
            payload.update(extra)
    return payload


def build_publish_input(
    metadata: Mapping[str, Any],
    content: str,
    tags: Sequence[NormalizedTag],
    *,
    publication_id: str,
    post_status: PostStatus = "public",
) -> dict[str, Any]:
    payload = _base_input(metadata, content, tags)
    payload["publicationId"] = publication_id
    if post_status == "draft":
        # An explicit null publishedAt keeps the post unpublished.
        payload["publishedAt"] = None
    return _apply_enrichers(payload, metadata)


def build_update_input(
    metadata: Mapping[str, Any],
    content: str,
    tags: Sequence[NormalizedTag],
    *,
    post_id: str,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"id": post_id}
    payload.update(_base_input(metadata, content, tags))
    return _apply_enrichers(payload, metadata)


def plan_post_request(
    metadata: Mapping[str, Any],
    content: str,
    tags: Sequence[NormalizedTag],
    *,
    publication_id: str,
    post_status: PostStatus = "public",
    update_existing: bool = False,
) -> RequestPlan:
    """
    Decide between updating an existing post and publishing a new one.

    An update needs update_existing, a publishedUrl and a post id extracted from it.
    When the id cannot be extracted the plan falls back to publishing and carries a
    fallback_reason for the caller to report as a warning.
    """
    published_url = metadata.get("publishedUrl")
    wants_update = bool(update_existing and published_url)
    post_id = extract_post_id(published_url) if wants_update else None

    if post_id:
        update_input = build_update_input(metadata, content, tags, post_id=post_id)
        return RequestPlan(
            request=PostRequest(operation="update", input=update_input),
            post_id=post_id,
        )

    fallback_reason: str | None = None
    if wants_update:
        fallback_reason = (
            f'Could not extract post ID from URL "{published_url}". '
            "Will create new post instead."
        )

    publish_input = build_publish_input(
        metadata,
        content,
        tags,
        publication_id=publication_id,
        post_status=post_status,
    )
    return RequestPlan(
        request=PostRequest(operation="publish", input=publish_input),
        fallback_reason=fallback_reason,
    )
