from __future__ import annotations

import re
from urllib.parse import urlparse


def is_valid_url(url: str) -> bool:
    """Absolute http(s) URL with a host."""
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        result = urlparse(url.strip())
    except ValueError:
        return False
    return result.scheme in ("http", "https") and bool(result.netloc)


def clean_text(text: str, max_length: int = 500) -> str:
    """Collapse whitespace and trim to max length."""
    text = re.sub(r"\s+", " ", text or "").strip()
    if len(text) > max_length:
        text = text[:max_length] + "..."
    return text

