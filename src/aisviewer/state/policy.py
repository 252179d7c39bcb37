"""Staleness policy for stored vessels.

This module intentionally contains no store bookkeeping; it only answers
whether a single record may stay.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from aisviewer.models._base import parse_server_time


def is_fresh(now: datetime, last_updated: str, timeout: timedelta) -> bool:
    """Decide whether a record observed at *last_updated* survives a sweep at *now*.

    Policy:
    - Fresh while ``now - last_updated <= timeout`` (the boundary is kept).
    - Unparsable timestamps are never fresh; the record is dropped on the
      next sweep instead of being retained forever.
    - Timestamps ahead of *now* (server clock skew) count as fresh.
    """
    observed = parse_server_time(last_updated)
    if observed is None:
        return False
    return now - observed <= timeout
