"""Geohash encoding and bounding-box coverage.

The vessel service partitions positions into base-32 geohash buckets.
A viewport is requested as the set of buckets that cover it, computed by
sampling the rectangle on a grid no coarser than one bucket.
"""

from __future__ import annotations

import logging
import math

from aisviewer._constants import MAX_COVER_SAMPLES, MAX_TILE_PRECISION, TILE_PRECISION, TILE_SAMPLE_STEP

_logger = logging.getLogger(__name__)

_BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"
_DECODE_MAP: dict[str, int] = {ch: idx for idx, ch in enumerate(_BASE32)}

_LAT_RANGE = (-90.0, 90.0)
_LON_RANGE = (-180.0, 180.0)
# Sample a little finer than one bucket so float drift cannot open a gap.
_CELL_STEP_FRACTION = 0.9


def _check_precision(precision: int) -> None:
    if not 1 <= precision <= MAX_TILE_PRECISION:
        raise ValueError(f"precision must be between 1 and {MAX_TILE_PRECISION}, got {precision}")


def encode(latitude: float, longitude: float, precision: int = TILE_PRECISION) -> str:
    """Encode a coordinate into a geohash of *precision* characters."""
    _check_precision(precision)
    lat_lo, lat_hi = _LAT_RANGE
    lon_lo, lon_hi = _LON_RANGE

    chars: list[str] = []
    bit = 0
    value = 0
    even = True  # even bits refine longitude
    while len(chars) < precision:
        if even:
            mid = (lon_lo + lon_hi) / 2
            if longitude >= mid:
                value = (value << 1) | 1
                lon_lo = mid
            else:
                value <<= 1
                lon_hi = mid
        else:
            mid = (lat_lo + lat_hi) / 2
            if latitude >= mid:
                value = (value << 1) | 1
                lat_lo = mid
            else:
                value <<= 1
                lat_hi = mid
        even = not even
        bit += 1
        if bit == 5:
            chars.append(_BASE32[value])
            bit = 0
            value = 0
    return "".join(chars)


def decode_bounds(geohash: str) -> tuple[float, float, float, float]:
    """Return ``(min_lat, min_lon, max_lat, max_lon)`` of a geohash bucket.

    Raises :class:`ValueError` for empty input or characters outside the
    geohash alphabet.
    """
    text = geohash.strip().lower()
    if not text:
        raise ValueError("geohash must be non-empty")
    lat_lo, lat_hi = _LAT_RANGE
    lon_lo, lon_hi = _LON_RANGE
    even = True
    for ch in text:
        idx = _DECODE_MAP.get(ch)
        if idx is None:
            raise ValueError(f"invalid geohash character {ch!r} in {geohash!r}")
        for shift in range(4, -1, -1):
            bit_set = (idx >> shift) & 1
            if even:
                mid = (lon_lo + lon_hi) / 2
                if bit_set:
                    lon_lo = mid
                else:
                    lon_hi = mid
            else:
                mid = (lat_lo + lat_hi) / 2
                if bit_set:
                    lat_lo = mid
                else:
                    lat_hi = mid
            even = not even
    return lat_lo, lon_lo, lat_hi, lon_hi


def decode(geohash: str) -> tuple[float, float]:
    """Return the ``(latitude, longitude)`` centre of a geohash bucket."""
    min_lat, min_lon, max_lat, max_lon = decode_bounds(geohash)
    return (min_lat + max_lat) / 2, (min_lon + max_lon) / 2


def cell_size(precision: int) -> tuple[float, float]:
    """Return the ``(lat_height, lon_width)`` in degrees of a bucket."""
    _check_precision(precision)
    total_bits = precision * 5
    lon_bits = (total_bits + 1) // 2
    lat_bits = total_bits // 2
    return 180.0 / (1 << lat_bits), 360.0 / (1 << lon_bits)


def _axis_count(lo: float, hi: float, step: float) -> int:
    return int(math.floor((hi - lo) / step)) + 2


def _axis_samples(lo: float, hi: float, step: float) -> list[float]:
    # Integer stepping avoids float drift; the upper edge is always sampled
    # and no sample lies beyond it.
    count = int(math.floor((hi - lo) / step))
    samples = [min(lo + i * step, hi) for i in range(count + 1)]
    if samples[-1] < hi:
        samples.append(hi)
    return samples


def cover_bounding_box(
    min_lon: float,
    min_lat: float,
    max_lon: float,
    max_lat: float,
    precision: int = TILE_PRECISION,
    step: float | None = None,
    max_samples: int = MAX_COVER_SAMPLES,
) -> set[str]:
    """Return the set of geohashes covering a rectangle.

    The rectangle is sampled on a grid of *step* degrees (default
    ``TILE_SAMPLE_STEP``), narrowed to the bucket size so that neighbouring
    samples can never jump over a bucket. Samples outside the valid
    coordinate domain are dropped. An inverted rectangle yields an empty
    set.

    Raises :class:`ValueError` when the grid would need more than
    *max_samples* points.
    """
    _check_precision(precision)
    if min_lon > max_lon or min_lat > max_lat:
        return set()

    lat_height, lon_width = cell_size(precision)
    base_step = TILE_SAMPLE_STEP if step is None else step
    if base_step <= 0:
        raise ValueError(f"step must be positive, got {base_step}")
    lat_step = min(base_step, lat_height * _CELL_STEP_FRACTION)
    lon_step = min(base_step, lon_width * _CELL_STEP_FRACTION)

    needed = _axis_count(min_lat, max_lat, lat_step) * _axis_count(min_lon, max_lon, lon_step)
    if needed > max_samples:
        raise ValueError(
            f"bbox ({min_lon}, {min_lat}, {max_lon}, {max_lat}) needs about {needed} samples "
            f"at precision {precision}, limit is {max_samples}"
        )

    lats = [lat for lat in _axis_samples(min_lat, max_lat, lat_step) if -90.0 <= lat <= 90.0]
    lons = [lon for lon in _axis_samples(min_lon, max_lon, lon_step) if -180.0 <= lon <= 180.0]

    geohashes = {encode(lat, lon, precision) for lat in lats for lon in lons}
    _logger.debug(
        "Covered bbox (%s, %s, %s, %s) with %d geohashes at precision %d",
        min_lon,
        min_lat,
        max_lon,
        max_lat,
        len(geohashes),
        precision,
    )
    return geohashes
