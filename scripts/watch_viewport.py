#!/usr/bin/env python3
"""Watch the vessels inside one map viewport.

Runs the poll controller against a live vessel service for a fixed
bounding box and prints a status line after every snapshot change.

Usage
-----
::

    export AIS_BASE_URL="http://localhost:8000"
    python scripts/watch_viewport.py --bbox -122.5,37.7,-122.3,37.8 --zoom 13

Options::

    --bbox MINLON,MINLAT,MAXLON,MAXLAT   Viewport to watch (default: San Francisco)
    --zoom Z                             Map zoom level (default: 13)
    --duration SECONDS                   Stop after this many seconds (default: 60)
    --geojson FILE                       Write the final snapshot as GeoJSON
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from aisviewer import (
    AisClient,
    Bbox,
    PollStatus,
    ViewerConfig,
    VesselSnapshot,
    VesselStore,
    Viewport,
    ViewportPollController,
    snapshot_to_feature_collection,
)

_DEFAULT_BBOX = "-122.5,37.7,-122.3,37.8"


def _parse_bbox(text: str) -> Bbox:
    parts = [part.strip() for part in text.split(",")]
    if len(parts) != 4:
        raise argparse.ArgumentTypeError("bbox must be MINLON,MINLAT,MAXLON,MAXLAT")
    try:
        min_lon, min_lat, max_lon, max_lat = (float(part) for part in parts)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"bbox must contain numbers: {text}") from exc
    return Bbox(min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat)


def _print_snapshot(snapshot: VesselSnapshot) -> None:
    print(f"v{snapshot.version}: {len(snapshot)} vessels (cursor {snapshot.cursor})")


def _print_status(status: PollStatus) -> None:
    if status.error:
        print(f"!! {status.error}", file=sys.stderr)
    if status.zoom_hint:
        print(status.zoom_hint, file=sys.stderr)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Poll the vessel service for one viewport.")
    parser.add_argument("--bbox", type=_parse_bbox, default=_parse_bbox(_DEFAULT_BBOX), help="Viewport bounds")
    parser.add_argument("--zoom", type=float, default=13.0, help="Map zoom level")
    parser.add_argument("--duration", type=float, default=60.0, help="Seconds to run")
    parser.add_argument("--geojson", help="Write the final snapshot to FILE as GeoJSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = ViewerConfig.from_env()
    store = VesselStore(stale_timeout=config.stale_timeout)
    store.add_listener(_print_snapshot)

    async with AisClient(config) as client:
        async with ViewportPollController(store, client, config=config, on_status=_print_status) as controller:
            controller.update_viewport(Viewport(bbox=args.bbox, zoom=args.zoom))
            print(f"Watching {len(controller.geohashes)} geohash bucket(s) at zoom {args.zoom:g}")
            await asyncio.sleep(args.duration)

    if args.geojson:
        payload = json.dumps(snapshot_to_feature_collection(store.snapshot), indent=2)
        Path(args.geojson).write_text(payload, encoding="utf-8")
        print(f"GeoJSON written to {args.geojson}")


if __name__ == "__main__":
    asyncio.run(main())
