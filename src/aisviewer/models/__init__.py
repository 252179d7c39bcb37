"""Data models for vessel service payloads."""

from aisviewer.models._base import AisBaseModel, format_server_time, parse_server_time
from aisviewer.models.response import FetchRequest, VesselsResponse
from aisviewer.models.vessel import Vessel
from aisviewer.models.viewport import Bbox, Viewport

__all__ = [
    "AisBaseModel",
    "Bbox",
    "FetchRequest",
    "Vessel",
    "VesselsResponse",
    "Viewport",
    "format_server_time",
    "parse_server_time",
]
