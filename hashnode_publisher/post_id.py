from __future__ import annotations

import re
from typing import Any

# Hashnode post ids are 25 character lowercase cuids at the end of the post URL,
# e.g. https://blog.example.dev/my-post-title-clx0a1b2c3d4e5f6g7h8i9j0k
_POST_ID_RE = re.compile(r"([a-z0-9]{25})(?:\?|\Z)")


def extract_post_id(url: Any) -> str | None:
    if not isinstance(url, str) or not url:
        return None

    match = _POST_ID_RE.search(url)
    return match.group(1) if match else None
