from __future__ import annotations

from .client import HashnodeClient, RemotePost
from .config import resolve_config, resolve_runtime_secrets
from .config_schema import PublisherConfig
from .errors import (
    ConfigError,
    FileProcessingError,
    NoTagsError,
    ParseError,
    ReadError,
    UpstreamError,
    ValidationError,
    WriteBackError,
)
from .post_id import extract_post_id
from .runner import BatchResult, run_batch
from .tags import NormalizedTag, normalize_tags

__all__ = [
    "BatchResult",
    "ConfigError",
    "FileProcessingError",
    "HashnodeClient",
    "NoTagsError",
    "NormalizedTag",
    "ParseError",
    "PublisherConfig",
    "ReadError",
    "RemotePost",
    "UpstreamError",
    "ValidationError",
    "WriteBackError",
    "extract_post_id",
    "normalize_tags",
    "resolve_config",
    "resolve_runtime_secrets",
    "run_batch",
]
