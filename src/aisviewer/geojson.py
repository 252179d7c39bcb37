"""GeoJSON view of a vessel snapshot for map renderers."""

from __future__ import annotations

from typing import Any

from aisviewer.models.vessel import Vessel
from aisviewer.state.store import VesselSnapshot


def vessel_to_feature(vessel: Vessel) -> dict[str, Any]:
    return {
        "type": "Feature",
        "id": vessel.mmsi,
        "geometry": {
            "type": "Point",
            "coordinates": [vessel.longitude, vessel.latitude],
        },
        "properties": {
            "mmsi": vessel.mmsi,
            "course": vessel.course,
            "speed": vessel.speed,
            "ship_type": vessel.ship_type,
            "last_updated": vessel.last_updated,
        },
    }


def snapshot_to_feature_collection(snapshot: VesselSnapshot) -> dict[str, Any]:
    """Render *snapshot* as a ``FeatureCollection`` of vessel points, ordered by MMSI."""
    return {
        "type": "FeatureCollection",
        "features": [vessel_to_feature(snapshot.vessels[mmsi]) for mmsi in sorted(snapshot.vessels)],
    }
