"""Vessel list endpoint: GET /api/vessels.

Query: ``bbox=minLon,minLat,maxLon,maxLat``, ``zoom``, optional ``since``
cursor and optional comma-separated ``geohashes``.
Response: ``{"vessels": [...], "server_time": "...", "is_delta": bool}``.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from aisviewer._constants import VESSELS_ENDPOINT
from aisviewer._transport import JsonTransport
from aisviewer.exceptions import AisApiError
from aisviewer.models.response import FetchRequest, VesselsResponse
from aisviewer.models.vessel import Vessel

_logger = logging.getLogger(__name__)


def _parse_vessels(items: Any) -> list[Vessel]:
    """Validate vessel records one by one, skipping malformed entries."""
    if items is None:
        return []
    if not isinstance(items, list):
        raise AisApiError(f"'vessels' must be a list, got {type(items).__name__}", endpoint=VESSELS_ENDPOINT)
    vessels: list[Vessel] = []
    for item in items:
        try:
            vessels.append(Vessel.model_validate(item))
        except ValidationError:
            _logger.debug("Skipping malformed vessel record: %r", item, exc_info=True)
    return vessels


def parse_vessels_response(payload: dict[str, Any]) -> VesselsResponse:
    """Turn a decoded response body into a :class:`VesselsResponse`.

    Raises :class:`AisApiError` if the envelope is unusable (for example
    a missing ``server_time``). Individual malformed vessels are dropped.
    """
    vessels = _parse_vessels(payload.get("vessels"))
    envelope = {key: value for key, value in payload.items() if key != "vessels"}
    try:
        return VesselsResponse.model_validate({**envelope, "vessels": vessels, "raw": payload})
    except ValidationError as exc:
        raise AisApiError(f"Malformed response from {VESSELS_ENDPOINT}: {exc}", endpoint=VESSELS_ENDPOINT) from exc


async def fetch_vessels(transport: JsonTransport, request: FetchRequest) -> VesselsResponse:
    """Request the vessels for *request* and parse the reply."""
    payload = await transport.get_json(VESSELS_ENDPOINT, request.to_query())
    response = parse_vessels_response(payload)
    skipped = len(payload.get("vessels") or []) - len(response.vessels)
    if skipped > 0:
        _logger.warning("Dropped %d malformed vessel record(s) from %s", skipped, VESSELS_ENDPOINT)
    return response
