from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

import requests

from .config_schema import DEFAULT_API_URL
from .errors import UpstreamError
from .payload import PostRequest

_POST_FIELDS = """\
    post {
      id
      title
      url
    }"""

PUBLISH_POST_MUTATION = f"""\
mutation PublishPost($input: PublishPostInput!) {{
  publishPost(input: $input) {{
{_POST_FIELDS}
  }}
}}
"""

UPDATE_POST_MUTATION = f"""\
mutation UpdatePost($input: UpdatePostInput!) {{
  updatePost(input: $input) {{
{_POST_FIELDS}
  }}
}}
"""


class _HTTPSession(Protocol):
    headers: Any

    def post(self, url: str, **kwargs: Any) -> Any: ...


@dataclass(frozen=True)
class RemotePost:
    id: str
    title: str
    url: str


def _error_messages(errors: Any) -> list[str]:
    if not isinstance(errors, list):
        return [str(errors)]

    out: list[str] = []
    for item in errors:
        if isinstance(item, Mapping):
            msg = str(item.get("message") or "").strip()
        else:
            msg = str(item or "").strip()
        out.append(msg or "unknown error")
    return out


def _extract_post(body: Mapping[str, Any], field: str) -> RemotePost | None:
    data = body.get("data")
    if not isinstance(data, Mapping):
        return None

    result = data.get(field)
    if not isinstance(result, Mapping):
        return None

    post = result.get("post")
    if not isinstance(post, Mapping):
        return None

    return RemotePost(
        id=str(post.get("id") or ""),
        title=str(post.get("title") or ""),
        url=str(post.get("url") or ""),
    )


class HashnodeClient:
    """
    Thin wrapper around Hashnode's GraphQL endpoint for the two post mutations.

    One HTTP request per call, no retries: the caller processes files one at a time.
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        session: _HTTPSession | None = None,
    ) -> None:
        if not (token or "").strip():
            raise ValueError("token must be a non-empty string")

        self._api_url = api_url
        self._session: _HTTPSession = session or requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                # Hashnode personal access tokens are sent as-is, without a scheme.
                "Authorization": token,
            }
        )

    def publish_post(self, post_input: Mapping[str, Any]) -> RemotePost | None:
        return self._mutate("PublishPost", PUBLISH_POST_MUTATION, "publishPost", post_input)

    def update_post(self, post_input: Mapping[str, Any]) -> RemotePost | None:
        return self._mutate("UpdatePost", UPDATE_POST_MUTATION, "updatePost", post_input)

    def send(self, request: PostRequest) -> RemotePost | None:
        if request.operation == "update":
            return self.update_post(request.input)
        return self.publish_post(request.input)

    def _mutate(
        self,
        name: str,
        query: str,
        field: str,
        post_input: Mapping[str, Any],
    ) -> RemotePost | None:
        body = {
            "query": query,
            "operationName": name,
            "variables": {"input": dict(post_input)},
        }

        try:
            response = self._session.post(self._api_url, json=body)
        except requests.RequestException as e:
            raise UpstreamError(f"Hashnode request failed ({name}): {e}") from e

        status = int(getattr(response, "status_code", 200) or 200)

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"Hashnode returned a non-JSON response ({name}, HTTP {status})"
            ) from e

        if not isinstance(payload, Mapping):
            raise UpstreamError(f"Hashnode returned an unexpected response ({name}): {payload!r}")

        errors = payload.get("errors")
        if errors:
            joined = ", ".join(_error_messages(errors))
            raise UpstreamError(f"Hashnode API error: {joined}")

        if status >= 400:
            raise UpstreamError(f"Hashnode request failed ({name}): HTTP {status}")

        return _extract_post(payload, field)
