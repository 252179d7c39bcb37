"""HTTP transport for the vessel service JSON API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from aisviewer._constants import USER_AGENT
from aisviewer._redact import redact_url, summarize_for_log
from aisviewer.config import ViewerConfig
from aisviewer.exceptions import AisTransportError

_logger = logging.getLogger(__name__)


class JsonTransport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, str]) -> dict[str, Any]:
        ...


class HttpTransport:
    """aiohttp-backed transport that returns decoded JSON objects."""

    def __init__(
        self,
        config: ViewerConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(self, endpoint: str, params: Mapping[str, str]) -> dict[str, Any]:
        """GET *endpoint* with query *params* and return the JSON object body."""
        url = f"{self._config.base_url.rstrip('/')}{endpoint}"
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s params=%s", redact_url(url), summarize_for_log(dict(params)))

        try:
            async with self._http.get(url, params=dict(params), headers=headers, timeout=self._timeout) as resp:
                raw = await resp.read()
                charset = resp.charset or "utf-8"
                if resp.status != 200:
                    snippet = raw[:200].decode("utf-8", errors="replace")
                    raise AisTransportError(
                        f"HTTP {resp.status} from {endpoint}: {snippet}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except AisTransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise AisTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise AisTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body = json.loads(raw.decode(charset))
        except (UnicodeDecodeError, LookupError) as exc:
            raise AisTransportError(
                f"Undecodable {charset} body from {endpoint}: {raw[:200]!r}",
                endpoint=endpoint,
            ) from exc
        except json.JSONDecodeError as exc:
            raise AisTransportError(
                f"Invalid JSON from {endpoint}: {raw[:200].decode(charset, errors='replace')}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(body, dict):
            raise AisTransportError(
                f"Expected a JSON object from {endpoint}, got {type(body).__name__}",
                endpoint=endpoint,
            )

        _logger.debug("Response from %s: %s", endpoint, summarize_for_log(body))
        return body
