"""aisviewer - Async viewport-driven AIS vessel tracking client."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyaisviewer")
except PackageNotFoundError:
    __version__ = "0+local"
from aisviewer.client import AisClient, VesselFetcher
from aisviewer.config import ViewerConfig
from aisviewer.exceptions import (
    AisApiError,
    AisConfigError,
    AisTransportError,
    AisViewerError,
)
from aisviewer.geohash import cover_bounding_box, decode, decode_bounds, encode
from aisviewer.geojson import snapshot_to_feature_collection
from aisviewer.models import Bbox, FetchRequest, Vessel, VesselsResponse, Viewport, parse_server_time
from aisviewer.poller import PollState, PollStatus, ViewportPollController
from aisviewer.state import VesselSnapshot, VesselStore

__all__ = [
    "__version__",
    "AisApiError",
    "AisClient",
    "AisConfigError",
    "AisTransportError",
    "AisViewerError",
    "Bbox",
    "FetchRequest",
    "PollState",
    "PollStatus",
    "Vessel",
    "VesselFetcher",
    "VesselSnapshot",
    "VesselStore",
    "VesselsResponse",
    "Viewport",
    "ViewerConfig",
    "ViewportPollController",
    "cover_bounding_box",
    "decode",
    "decode_bounds",
    "encode",
    "parse_server_time",
    "snapshot_to_feature_collection",
]
