"""Viewport and bounding-box models."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict


class Bbox(BaseModel):
    """Axis-aligned rectangle in degrees, ordered like the service expects."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @property
    def is_degenerate(self) -> bool:
        """True when the rectangle is inverted on either axis."""
        return self.min_lon > self.max_lon or self.min_lat > self.max_lat

    def as_query(self) -> str:
        return f"{self.min_lon},{self.min_lat},{self.max_lon},{self.max_lat}"

    @classmethod
    def from_bounds(cls, south_west: Sequence[float], north_east: Sequence[float]) -> Bbox:
        """Build from two ``(lon, lat)`` corners.

        Map SDKs report visible bounds as corner pairs in this order.
        """
        return cls(
            min_lon=float(south_west[0]),
            min_lat=float(south_west[1]),
            max_lon=float(north_east[0]),
            max_lat=float(north_east[1]),
        )


class Viewport(BaseModel):
    """What the map currently shows."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bbox: Bbox
    zoom: float
