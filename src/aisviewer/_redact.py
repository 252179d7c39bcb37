"""Helpers for compact debug logging.

The transport logs the request URL, its query and the decoded response.
Responses can carry hundreds of vessel records, so payloads are
summarized before they reach the log. ``AIS_BASE_URL`` may embed basic
auth credentials, which are masked.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urlsplit, urlunsplit


def redact_url(url: str) -> str:
    """Return *url* with any userinfo password replaced by ``***``."""
    parts = urlsplit(url)
    if parts.password is None:
        return url
    host = parts.hostname or ""
    if parts.port is not None:
        host = f"{host}:{parts.port}"
    netloc = f"{parts.username}:***@{host}"
    return urlunsplit(parts._replace(netloc=netloc))


def summarize_for_log(value: Any, *, max_string: int = 200, max_items: int = 5, _depth: int = 0) -> Any:
    """Return a trimmed copy of *value*.

    Strings are cut at *max_string* characters and sequences keep their
    first *max_items* entries followed by a ``"<N more>"`` marker.
    """
    if _depth > 8:
        return "<nested>"
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}...<{len(value)} chars>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, Mapping):
        return {
            str(k): summarize_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1)
            for k, v in value.items()
        }
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        head = [summarize_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1) for v in value[:max_items]]
        if len(value) > max_items:
            head.append(f"<{len(value) - max_items} more>")
        return head
    return repr(value)
