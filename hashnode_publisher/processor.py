from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .client import RemotePost
from .config_schema import PublisherConfig
from .document import MarkdownDocument, read_markdown_file, with_published_url, write_markdown_file
from .errors import FileProcessingError, NoTagsError, UpstreamError
from .payload import PostRequest, RequestPlan, plan_post_request
from .run_log import RunLogger
from .tags import normalize_tags
from .validate import validate_frontmatter


class PostSender(Protocol):
    def send(self, request: PostRequest) -> RemotePost | None: ...


@dataclass(frozen=True)
class FileResult:
    filename: str
    action: str
    post: RemotePost
    url_recorded: bool


def plan_document(
    doc: MarkdownDocument,
    filename: str,
    *,
    config: PublisherConfig,
    log: RunLogger,
) -> RequestPlan:
    """
    Validate one parsed document and decide which mutation to send.

    Raises ValidationError or NoTagsError; a failed post id extraction is only a warning.
    """
    validate_frontmatter(doc.metadata, filename)

    tags = normalize_tags(doc.metadata.get("tags"))
    if not tags:
        raise NoTagsError("No valid tags found after processing", filename=filename)

    plan = plan_post_request(
        doc.metadata,
        doc.content,
        tags,
        publication_id=config.publication_id,
        post_status=config.post_status,
        update_existing=config.update_existing_posts,
    )

    if plan.fallback_reason:
        log.warning(
            "post_id_not_found",
            message=f'{plan.fallback_reason} ("{filename}")',
            file=filename,
            published_url=str(doc.metadata.get("publishedUrl")),
        )

    return plan


def plan_markdown_file(path: Path, *, config: PublisherConfig, log: RunLogger) -> RequestPlan:
    filename = path.name
    try:
        doc = read_markdown_file(path)
        return plan_document(doc, filename, config=config, log=log)
    except FileProcessingError as e:
        raise e.for_file(filename)


def process_markdown_file(
    path: Path,
    *,
    client: PostSender,
    config: PublisherConfig,
    log: RunLogger,
) -> FileResult:
    """
    Publish or update the Hashnode post for one Markdown file.

    Steps run strictly in order: read, parse, validate, normalize tags, plan, call the
    API, and finally write publishedUrl back when it is new or changed. Every failure is
    raised as a FileProcessingError naming the file.
    """
    filename = path.name
    try:
        return _process(path, filename, client=client, config=config, log=log)
    except FileProcessingError as e:
        raise e.for_file(filename)
    except Exception as e:
        log.exception("file_unexpected_error", exc=e, file=filename)
        raise FileProcessingError(f"Unexpected error: {e}", filename=filename) from e


def _process(
    path: Path,
    filename: str,
    *,
    client: PostSender,
    config: PublisherConfig,
    log: RunLogger,
) -> FileResult:
    doc = read_markdown_file(path)
    plan = plan_document(doc, filename, config=config, log=log)

    title = plan.request.input["title"]
    if plan.is_update:
        log.info(
            "post_update_started",
            message=f"Updating existing post: {title}",
            file=filename,
            post_id=plan.post_id,
        )
    else:
        log.info(
            "post_publish_started",
            message=f"Publishing new post: {title}",
            file=filename,
            post_status=config.post_status,
        )

    post = client.send(plan.request)
    if post is None:
        raise UpstreamError("No post data returned from API", filename=filename)

    action = "updated" if plan.is_update else "published"
    log.info(
        "post_saved",
        message=f"Successfully {action} post: {post.title} ({post.url})",
        file=filename,
        action=action,
        post_id=post.id,
        url=post.url,
    )

    stored_url = doc.metadata.get("publishedUrl")
    url_recorded = False
    if not post.url:
        log.warning(
            "post_url_missing",
            message=f'API response did not include a post URL; "{filename}" was not updated',
            file=filename,
        )
    elif not stored_url or stored_url != post.url:
        write_markdown_file(path, with_published_url(doc, post.url))
        url_recorded = True
        log.info(
            "published_url_recorded",
            message=f'Updated "{filename}" with published URL',
            file=filename,
            url=post.url,
        )

    return FileResult(filename=filename, action=action, post=post, url_recorded=url_recorded)
