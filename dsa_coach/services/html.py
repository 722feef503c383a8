from __future__ import annotations

import re

_TAG_PATTERN = re.compile(r"<[^>]*>?")


def strip_html(html: str) -> str:
    """
    Remove markup tags, keeping inner text. Entities are left as-is.
    """

    return _TAG_PATTERN.sub("", html)
