"""Copy-on-write vessel store.

This is the only component allowed to change which vessels are visible.
Every mutation builds a new mapping and swaps it in as a whole, so a
snapshot obtained by a reader is never modified afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from types import MappingProxyType

from aisviewer._constants import STALE_TIMEOUT_MS
from aisviewer.models.vessel import Vessel
from aisviewer.state.policy import is_fresh

_logger = logging.getLogger(__name__)

_EMPTY: Mapping[int, Vessel] = MappingProxyType({})


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class VesselSnapshot:
    """Immutable view of the store at one version."""

    vessels: Mapping[int, Vessel] = field(default_factory=lambda: _EMPTY)
    cursor: str | None = None
    version: int = 0

    def __len__(self) -> int:
        return len(self.vessels)


SnapshotListener = Callable[[VesselSnapshot], None]


class VesselStore:
    """In-memory store of the currently visible vessels.

    Holds one record per MMSI plus the server-time cursor used to request
    deltas. Merges are last-write-wins in merge order; the server is
    trusted to send fresh data per vessel, so record timestamps are not
    compared on merge.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = _utcnow,
        stale_timeout: timedelta = timedelta(milliseconds=STALE_TIMEOUT_MS),
    ) -> None:
        self._clock = clock
        self._stale_timeout = stale_timeout
        self._snapshot = VesselSnapshot()
        self._listeners: list[SnapshotListener] = []

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> VesselSnapshot:
        return self._snapshot

    @property
    def vessels(self) -> Mapping[int, Vessel]:
        return self._snapshot.vessels

    @property
    def cursor(self) -> str | None:
        """Server time of the last successful fetch, ``None`` after a reset."""
        return self._snapshot.cursor

    @property
    def version(self) -> int:
        return self._snapshot.version

    def __len__(self) -> int:
        return len(self._snapshot.vessels)

    def __contains__(self, mmsi: object) -> bool:
        return mmsi in self._snapshot.vessels

    def get(self, mmsi: int) -> Vessel | None:
        return self._snapshot.vessels.get(mmsi)

    def add_listener(self, callback: SnapshotListener) -> Callable[[], None]:
        """Register *callback* for every new snapshot. Returns an unsubscribe callable."""
        self._listeners.append(callback)

        def _remove() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _remove

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------

    def _swap(self, vessels: Mapping[int, Vessel], cursor: str | None) -> None:
        # Callers pass either a freshly built dict or an existing read-only proxy.
        if not vessels:
            frozen: Mapping[int, Vessel] = _EMPTY
        elif isinstance(vessels, MappingProxyType):
            frozen = vessels
        else:
            frozen = MappingProxyType(vessels)
        snapshot = VesselSnapshot(
            vessels=frozen,
            cursor=cursor,
            version=self._snapshot.version + 1,
        )
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.debug("Snapshot listener failed", exc_info=True)

    def merge(self, vessel: Vessel) -> None:
        """Insert or replace the record for ``vessel.mmsi``."""
        vessels = dict(self._snapshot.vessels)
        vessels[vessel.mmsi] = vessel
        self._swap(vessels, self._snapshot.cursor)

    def merge_many(self, vessels: Iterable[Vessel]) -> int:
        """Merge a batch as a single snapshot swap.

        Later entries for the same MMSI win. Returns the number of records
        merged; an empty batch leaves the snapshot untouched.
        """
        merged = dict(self._snapshot.vessels)
        count = 0
        for vessel in vessels:
            merged[vessel.mmsi] = vessel
            count += 1
        if count:
            self._swap(merged, self._snapshot.cursor)
        return count

    def evict_stale(self, now: datetime | None = None, timeout: timedelta | None = None) -> int:
        """Drop every vessel whose ``last_updated`` is older than *timeout* at *now*.

        Records with an unparsable ``last_updated`` are dropped as well.
        Returns the number of evicted records.
        """
        current = now if now is not None else self._clock()
        if current.tzinfo is None:
            current = current.replace(tzinfo=UTC)
        limit = timeout if timeout is not None else self._stale_timeout

        before = self._snapshot.vessels
        kept = {mmsi: vessel for mmsi, vessel in before.items() if is_fresh(current, vessel.last_updated, limit)}
        evicted = len(before) - len(kept)
        if evicted:
            _logger.debug("Evicted %d stale vessel(s), %d remain", evicted, len(kept))
            self._swap(kept, self._snapshot.cursor)
        return evicted

    def reset(self) -> None:
        """Forget all vessels and the cursor."""
        if not self._snapshot.vessels and self._snapshot.cursor is None:
            return
        self._swap(_EMPTY, None)

    def set_cursor(self, server_time: str) -> None:
        if server_time == self._snapshot.cursor:
            return
        self._swap(self._snapshot.vessels, server_time)
