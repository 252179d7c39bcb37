"""Viewport-driven poll controller.

Decides on every viewport change and on every timer tick whether to ask
the vessel service for data, and feeds the answers into a
:class:`~aisviewer.state.store.VesselStore`.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import math
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from aisviewer._timer import RepeatingTimer
from aisviewer.client import VesselFetcher
from aisviewer.config import ViewerConfig
from aisviewer.exceptions import AisViewerError
from aisviewer.geohash import cover_bounding_box
from aisviewer.models.viewport import Bbox, Viewport
from aisviewer.state.store import VesselStore

_logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to fetch vessels"


class PollState(StrEnum):
    INACTIVE = "inactive"
    ACTIVE = "active"


@dataclasses.dataclass(frozen=True)
class PollStatus:
    """Displayable controller status.

    ``error`` is set after a failed fetch and cleared by the next
    successful one. ``zoom_hint`` is set while a viewport is known but
    zoomed out below the visibility threshold.
    """

    state: PollState = PollState.INACTIVE
    is_loading: bool = False
    error: str | None = None
    zoom_hint: str | None = None
    last_count: int | None = None
    last_is_delta: bool | None = None


def round_zoom(zoom: float) -> int:
    """Round half up, matching how map SDKs report integer zoom levels."""
    return int(math.floor(zoom + 0.5))


class ViewportPollController:
    """Poll the vessel service while the viewport is zoomed in far enough.

    States:

    * ``INACTIVE``: no viewport, or zoom below ``min_visible_zoom``. No
      timer runs.
    * ``ACTIVE``: a timer ticks every ``poll_interval_ms``; each tick
      fetches and sweeps stale vessels.

    Every issued request takes a new generation number. A completion is
    applied only if it belongs to the latest generation and the
    controller is still active, so a late answer can neither resurrect
    vessels after a reset nor move the cursor behind a newer request.

    A tick that finds the latest request still running does not issue
    another one (it only sweeps), so a service slower than the poll
    interval still gets to answer.
    """

    def __init__(
        self,
        store: VesselStore,
        fetcher: VesselFetcher,
        *,
        config: ViewerConfig | None = None,
        on_status: Callable[[PollStatus], None] | None = None,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._config = config or ViewerConfig()
        self._on_status = on_status
        self._state = PollState.INACTIVE
        self._viewport: Viewport | None = None
        self._geohashes: frozenset[str] = frozenset()
        self._timer: RepeatingTimer | None = None
        self._generation = 0
        self._pending_generation: int | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._status = PollStatus()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def status(self) -> PollStatus:
        return self._status

    @property
    def viewport(self) -> Viewport | None:
        return self._viewport

    @property
    def bbox(self) -> Bbox | None:
        return self._viewport.bbox if self._viewport is not None else None

    @property
    def geohashes(self) -> frozenset[str]:
        """Geohash cover of the current bounding box."""
        return self._geohashes

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def timer_running(self) -> bool:
        return self._timer is not None and self._timer.is_running

    @property
    def fetch_in_flight(self) -> bool:
        """Whether the latest issued request has not completed yet."""
        return self._pending_generation is not None and self._pending_generation == self._generation

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ViewportPollController:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Stop polling and cancel pending fetches. The store is left as is."""
        self._stop_timer()
        self._generation += 1
        self._state = PollState.INACTIVE
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._set_status(state=PollState.INACTIVE, is_loading=False)

    async def wait_idle(self) -> None:
        """Wait until every fetch issued so far has completed."""
        while self._tasks:
            done, _ = await asyncio.wait(list(self._tasks))
            for task in done:
                if not task.cancelled() and task.exception() is not None:
                    raise task.exception()  # type: ignore[misc]

    # ------------------------------------------------------------------
    # Viewport handling
    # ------------------------------------------------------------------

    def update_viewport(self, viewport: Viewport | None) -> None:
        """React to the map's viewport. Must run on the event loop thread."""
        self._viewport = viewport
        min_zoom = self._config.min_visible_zoom

        if viewport is None or viewport.zoom < min_zoom:
            self._geohashes = frozenset()
            if self._state is PollState.ACTIVE:
                self._deactivate()
            else:
                # Zoomed-out region changes keep the store cleared.
                self._store.reset()
            hint = None if viewport is None else f"Zoom in to level {min_zoom:g} or higher to see vessels"
            self._set_status(state=PollState.INACTIVE, is_loading=False, zoom_hint=hint)
            return

        bbox = viewport.bbox
        try:
            self._geohashes = frozenset(
                cover_bounding_box(
                    bbox.min_lon,
                    bbox.min_lat,
                    bbox.max_lon,
                    bbox.max_lat,
                    precision=self._config.tile_precision,
                )
            )
        except ValueError as exc:
            # The bbox alone still bounds the request.
            _logger.warning("Requesting %s without a geohash cover: %s", bbox.as_query(), exc)
            self._geohashes = frozenset()

        if self._state is PollState.ACTIVE:
            # Keep the timer and the cursor; the next tick uses the new bbox.
            _logger.debug("Viewport moved to %s at zoom %.2f", bbox.as_query(), viewport.zoom)
            self._set_status(zoom_hint=None)
            return

        self._activate()

    def _activate(self) -> None:
        # Raises before any state changes when no event loop is running.
        self._issue_fetch()
        timer = RepeatingTimer(self._config.poll_interval, self._on_tick, name="vessel-poll")
        timer.start()
        self._timer = timer
        self._state = PollState.ACTIVE
        _logger.debug("Polling activated (poll interval %d ms)", self._config.poll_interval_ms)
        self._set_status(state=PollState.ACTIVE, zoom_hint=None)

    def _deactivate(self) -> None:
        _logger.debug("Polling deactivated, clearing %d vessel(s)", len(self._store))
        self._stop_timer()
        self._state = PollState.INACTIVE
        # Invalidate whatever is still in flight.
        self._generation += 1
        self._store.reset()

    def _stop_timer(self) -> None:
        timer = self._timer
        self._timer = None
        if timer is not None:
            timer.cancel()

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def _on_tick(self) -> None:
        if self._state is not PollState.ACTIVE:
            return
        if self.fetch_in_flight:
            _logger.debug("Request %d still running, skipping this poll", self._generation)
        else:
            self._issue_fetch()
        self._store.evict_stale(timeout=self._config.stale_timeout)

    def poll_now(self) -> bool:
        """Issue a fetch immediately if active. Returns whether one was issued.

        Unlike a timer tick, this supersedes a request that is still running.
        """
        if self._state is not PollState.ACTIVE:
            return False
        self._issue_fetch()
        return True

    def _issue_fetch(self) -> None:
        viewport = self._viewport
        if viewport is None:
            return
        loop = asyncio.get_running_loop()
        self._generation += 1
        self._pending_generation = self._generation
        task = loop.create_task(
            self._fetch(
                self._generation,
                viewport.bbox,
                round_zoom(viewport.zoom),
                self._store.cursor,
                self._geohashes,
            ),
            name=f"vessel-fetch-{self._generation}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _is_current(self, generation: int) -> bool:
        return self._state is PollState.ACTIVE and generation == self._generation

    def _clear_pending(self, generation: int) -> None:
        if self._pending_generation == generation:
            self._pending_generation = None

    async def _fetch(
        self,
        generation: int,
        bbox: Bbox,
        zoom: int,
        since: str | None,
        geohashes: frozenset[str],
    ) -> None:
        if self._is_current(generation):
            self._set_status(is_loading=True)
        try:
            response = await self._fetcher.fetch_vessels(bbox, zoom, since, geohashes)
        except AisViewerError as exc:
            if not self._is_current(generation):
                _logger.debug("Ignoring failure of superseded request %d: %s", generation, exc)
                return
            _logger.warning("Error fetching vessels: %s", exc)
            self._set_status(is_loading=False, error=FETCH_ERROR_MESSAGE)
            return
        finally:
            # Also covers cancellation and unexpected errors.
            self._clear_pending(generation)

        if not self._is_current(generation):
            _logger.debug(
                "Discarding superseded response %d (%d vessels, server_time %s)",
                generation,
                len(response.vessels),
                response.server_time,
            )
            return

        if response.vessels:
            self._store.merge_many(response.vessels)
        # An empty delta still confirms freshness up to server_time.
        self._store.set_cursor(response.server_time)
        _logger.debug("Fetched %d vessels (delta: %s)", len(response.vessels), response.is_delta)
        self._set_status(
            is_loading=False,
            error=None,
            last_count=len(response.vessels),
            last_is_delta=response.is_delta,
        )

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def _set_status(self, **changes: Any) -> None:
        status = dataclasses.replace(self._status, **changes)
        if status == self._status:
            return
        self._status = status
        if self._on_status is None:
            return
        try:
            self._on_status(status)
        except Exception:
            _logger.debug("on_status callback failed", exc_info=True)
