"""Vessel model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from aisviewer._normalize import safe_float, safe_int
from aisviewer.models._base import AisBaseModel, format_server_time, parse_server_time


class Vessel(AisBaseModel):
    """Last known state of one vessel as reported by the service.

    A record is immutable; a newer report for the same ``mmsi`` replaces
    the whole record in the store.

    Parameters
    ----------
    mmsi : int
        Maritime Mobile Service Identity. Unique key, must be positive.
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    course : float
        Course over ground in degrees. ``0`` when not reported.
    speed : float
        Speed over ground in knots. ``0`` when not reported.
    ship_type : int
        AIS ship type code. ``0`` when not reported.
    last_updated : str
        Server-side ISO-8601 time at which the vessel was last observed.
    """

    mmsi: int = Field(gt=0, validation_alias=AliasChoices("mmsi", "id"))
    latitude: float = Field(ge=-90.0, le=90.0, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(ge=-180.0, le=180.0, validation_alias=AliasChoices("longitude", "lon", "lng"))
    course: float = Field(default=0.0, validation_alias=AliasChoices("course", "cog", "heading"))
    speed: float = Field(default=0.0, validation_alias=AliasChoices("speed", "sog"))
    ship_type: int = Field(
        default=0,
        validation_alias=AliasChoices("ship_type", "shipType", "vessel_type", "type"),
    )
    last_updated: str = Field(validation_alias=AliasChoices("last_updated", "lastUpdated", "timestamp"))

    @field_validator("course", "speed", mode="before")
    @classmethod
    def _default_zero_float(cls, value: Any) -> float:
        parsed = safe_float(value)
        return 0.0 if parsed is None else parsed

    @field_validator("ship_type", mode="before")
    @classmethod
    def _default_zero_int(cls, value: Any) -> int:
        parsed = safe_int(value)
        return 0 if parsed is None else parsed

    @field_validator("last_updated", mode="before")
    @classmethod
    def _coerce_last_updated(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return format_server_time(value)
        return value

    @property
    def last_updated_at(self) -> datetime | None:
        """``last_updated`` as an aware UTC datetime, ``None`` if unparsable."""
        return parse_server_time(self.last_updated)
