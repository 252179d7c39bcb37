"""Tests for Pydantic model parsing of vessel service payloads."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from aisviewer.models import Bbox, FetchRequest, Vessel, VesselsResponse, Viewport, format_server_time, parse_server_time

# ------------------------------------------------------------------
# Timestamps
# ------------------------------------------------------------------


class TestParseServerTime:
    def test_zulu_suffix(self) -> None:
        assert parse_server_time("2024-01-01T00:00:10Z") == datetime(2024, 1, 1, 0, 0, 10, tzinfo=UTC)

    def test_offset_is_normalised_to_utc(self) -> None:
        parsed = parse_server_time("2024-01-01T02:00:00+02:00")
        assert parsed == datetime(2024, 1, 1, 0, 0, 0, tzinfo=UTC)
        assert parsed is not None and parsed.utcoffset() == timedelta(0)

    def test_fractional_seconds(self) -> None:
        parsed = parse_server_time("2024-01-01T00:00:10.123456Z")
        assert parsed is not None and parsed.microsecond == 123456

    def test_naive_is_utc(self) -> None:
        assert parse_server_time("2024-01-01T00:00:10") == datetime(2024, 1, 1, 0, 0, 10, tzinfo=UTC)

    def test_datetime_passthrough(self) -> None:
        value = datetime(2024, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=1)))
        assert parse_server_time(value) == datetime(2024, 1, 1, 0, 0, tzinfo=UTC)

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday", 12345, "2024-13-01T00:00:00Z"])
    def test_unparsable_returns_none(self, value: object) -> None:
        assert parse_server_time(value) is None

    def test_format_server_time(self) -> None:
        assert format_server_time(datetime(2024, 1, 1, 0, 0, 10, tzinfo=UTC)) == "2024-01-01T00:00:10Z"


# ------------------------------------------------------------------
# Vessel
# ------------------------------------------------------------------


class TestVessel:
    SAMPLE_PAYLOAD: dict = {
        "mmsi": 367123450,
        "latitude": 37.8,
        "longitude": -122.4,
        "course": 271.5,
        "speed": 12.3,
        "ship_type": 70,
        "last_updated": "2024-01-01T00:00:10Z",
        "name": "EXAMPLE",
    }

    def test_full_payload(self) -> None:
        vessel = Vessel.model_validate(self.SAMPLE_PAYLOAD)
        assert vessel.mmsi == 367123450
        assert vessel.latitude == 37.8
        assert vessel.longitude == -122.4
        assert vessel.course == 271.5
        assert vessel.speed == 12.3
        assert vessel.ship_type == 70
        assert vessel.last_updated == "2024-01-01T00:00:10Z"
        assert vessel.raw["name"] == "EXAMPLE"

    def test_optional_fields_default_to_zero(self) -> None:
        vessel = Vessel.model_validate(
            {"mmsi": 1, "lat": 10, "lon": 20, "course": None, "speed": "--", "last_updated": "2024-01-01T00:00:10Z"}
        )
        assert vessel.course == 0.0
        assert vessel.speed == 0.0
        assert vessel.ship_type == 0

    def test_unparsable_optional_falls_back_to_zero(self) -> None:
        vessel = Vessel.model_validate(
            {"mmsi": 1, "lat": 10, "lon": 20, "speed": "fast", "type": "cargo", "last_updated": "x"}
        )
        assert vessel.speed == 0.0
        assert vessel.ship_type == 0

    def test_aliases(self) -> None:
        vessel = Vessel.model_validate(
            {"mmsi": "5", "lat": "1.5", "lng": "2.5", "heading": 90, "vessel_type": "30", "lastUpdated": "t"}
        )
        assert vessel.mmsi == 5
        assert vessel.latitude == 1.5
        assert vessel.longitude == 2.5
        assert vessel.course == 90.0
        assert vessel.ship_type == 30
        assert vessel.last_updated == "t"

    def test_datetime_last_updated_is_formatted(self) -> None:
        vessel = Vessel(mmsi=1, latitude=0, longitude=0, last_updated=datetime(2024, 1, 1, tzinfo=UTC))
        assert vessel.last_updated == "2024-01-01T00:00:00Z"
        assert vessel.last_updated_at == datetime(2024, 1, 1, tzinfo=UTC)

    def test_last_updated_at_none_when_unparsable(self) -> None:
        vessel = Vessel(mmsi=1, latitude=0, longitude=0, last_updated="garbage")
        assert vessel.last_updated_at is None

    @pytest.mark.parametrize("mmsi", [0, -5, "abc", None])
    def test_invalid_mmsi_rejected(self, mmsi: object) -> None:
        with pytest.raises(ValidationError):
            Vessel.model_validate({"mmsi": mmsi, "lat": 0, "lon": 0, "last_updated": "t"})

    @pytest.mark.parametrize(("lat", "lon"), [(91.0, 0.0), (-91.0, 0.0), (0.0, 181.0), (0.0, -181.0)])
    def test_out_of_range_position_rejected(self, lat: float, lon: float) -> None:
        with pytest.raises(ValidationError):
            Vessel.model_validate({"mmsi": 1, "lat": lat, "lon": lon, "last_updated": "t"})

    def test_missing_last_updated_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Vessel.model_validate({"mmsi": 1, "lat": 0, "lon": 0})

    def test_frozen(self) -> None:
        vessel = Vessel.model_validate(self.SAMPLE_PAYLOAD)
        with pytest.raises(ValidationError):
            vessel.latitude = 1.0  # type: ignore[misc]


# ------------------------------------------------------------------
# Bbox / Viewport / FetchRequest / VesselsResponse
# ------------------------------------------------------------------


class TestBbox:
    def test_from_bounds(self) -> None:
        bbox = Bbox.from_bounds((-122.5, 37.7), (-122.3, 37.8))
        assert (bbox.min_lon, bbox.min_lat, bbox.max_lon, bbox.max_lat) == (-122.5, 37.7, -122.3, 37.8)
        assert not bbox.is_degenerate

    def test_degenerate(self) -> None:
        assert Bbox(min_lon=1, min_lat=0, max_lon=0, max_lat=1).is_degenerate
        assert Bbox(min_lon=0, min_lat=1, max_lon=1, max_lat=0).is_degenerate
        assert not Bbox(min_lon=1, min_lat=1, max_lon=1, max_lat=1).is_degenerate

    def test_as_query(self) -> None:
        assert Bbox(min_lon=-122.5, min_lat=37.7, max_lon=-122.3, max_lat=37.8).as_query() == "-122.5,37.7,-122.3,37.8"

    def test_viewport(self) -> None:
        viewport = Viewport(bbox=Bbox.from_bounds((0, 0), (1, 1)), zoom=12.5)
        assert viewport.zoom == 12.5


class TestFetchRequest:
    BBOX = Bbox(min_lon=-122.5, min_lat=37.7, max_lon=-122.3, max_lat=37.8)

    def test_full_request_query(self) -> None:
        query = FetchRequest(bbox=self.BBOX, zoom=13).to_query()
        assert query == {"bbox": "-122.5,37.7,-122.3,37.8", "zoom": "13"}

    def test_delta_request_query(self) -> None:
        query = FetchRequest(
            bbox=self.BBOX,
            zoom=13,
            since="2024-01-01T00:00:00Z",
            geohashes=("9q8yz", "9q8yy"),
        ).to_query()
        assert query["since"] == "2024-01-01T00:00:00Z"
        assert query["geohashes"] == "9q8yy,9q8yz"


class TestVesselsResponse:
    def test_parse(self) -> None:
        response = VesselsResponse.model_validate(
            {
                "vessels": [{"mmsi": 1, "latitude": 1, "longitude": 2, "last_updated": "2024-01-01T00:00:00Z"}],
                "server_time": "2024-01-01T00:00:05Z",
                "is_delta": True,
            }
        )
        assert [vessel.mmsi for vessel in response.vessels] == [1]
        assert response.server_time == "2024-01-01T00:00:05Z"
        assert response.is_delta is True

    def test_camel_case_and_defaults(self) -> None:
        response = VesselsResponse.model_validate({"serverTime": "2024-01-01T00:00:05Z"})
        assert response.vessels == []
        assert response.is_delta is False

    @pytest.mark.parametrize("server_time", [None, "", 12])
    def test_server_time_required(self, server_time: object) -> None:
        with pytest.raises(ValidationError):
            VesselsResponse.model_validate({"vessels": [], "server_time": server_time})
