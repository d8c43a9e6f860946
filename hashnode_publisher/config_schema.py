from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

_ENV_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

DEFAULT_API_URL = "https://gql.hashnode.com/"

PostStatus = Literal["draft", "public"]


def _validate_env_var_name(value: str) -> str:
    name = (value or "").strip()
    if not _ENV_NAME_RE.fullmatch(name):
        raise ValueError("must be a valid environment variable name")
    return name


def _require_text(value: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValueError("must be a non-empty string")
    return text


class PublisherConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    src: str
    publication_id: str
    post_status: PostStatus = "public"
    update_existing_posts: bool = False
    token_env: str = "HASHNODE_PAT"
    api_url: str = DEFAULT_API_URL

    @field_validator("src", "publication_id", "api_url")
    @classmethod
    def _must_be_non_empty(cls, v: str) -> str:
        return _require_text(v)

    @field_validator("post_status", mode="before")
    @classmethod
    def _normalize_post_status(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("token_env")
    @classmethod
    def _token_env_must_be_valid(cls, v: str) -> str:
        return _validate_env_var_name(v)
