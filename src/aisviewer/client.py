"""High-level async client for the vessel service."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol

import aiohttp

from aisviewer._api import vessels as _vessels_api
from aisviewer._transport import HttpTransport
from aisviewer.config import ViewerConfig
from aisviewer.exceptions import AisViewerError
from aisviewer.models.response import FetchRequest, VesselsResponse
from aisviewer.models.viewport import Bbox

_logger = logging.getLogger(__name__)


class VesselFetcher(Protocol):
    """What the poll controller needs from a vessel source.

    Implementations raise :class:`~aisviewer.exceptions.AisViewerError`
    on failure; an empty vessel list is a successful result.
    """

    async def fetch_vessels(
        self,
        bbox: Bbox,
        zoom: int,
        since: str | None = None,
        geohashes: Iterable[str] = (),
    ) -> VesselsResponse:
        ...


class AisClient:
    """Async client for the vessel service.

    Usage::

        async with AisClient(config) as client:
            response = await client.fetch_vessels(bbox, zoom=13)
    """

    def __init__(
        self,
        config: ViewerConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or ViewerConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None

    @property
    def config(self) -> ViewerConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> AisClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise AisViewerError("Client not initialized. Use 'async with AisClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def fetch_vessels(
        self,
        bbox: Bbox,
        zoom: int,
        since: str | None = None,
        geohashes: Iterable[str] = (),
    ) -> VesselsResponse:
        """Fetch the vessels inside *bbox*.

        With *since* the service answers with a delta (only vessels that
        changed after the cursor); without it, with a full snapshot.
        """
        transport = self._require_transport()
        request = FetchRequest(bbox=bbox, zoom=int(zoom), since=since, geohashes=tuple(geohashes))
        response = await _vessels_api.fetch_vessels(transport, request)
        _logger.debug(
            "Fetched %d vessels (delta: %s, server_time: %s)",
            len(response.vessels),
            response.is_delta,
            response.server_time,
        )
        return response
