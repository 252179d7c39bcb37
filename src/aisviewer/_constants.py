"""Internal constants shared across the library."""

BASE_URL = "http://localhost:8000"
USER_AGENT = "pyaisviewer"
VESSELS_ENDPOINT = "/api/vessels"

# ------------------------------------------------------------------
# Viewport / polling defaults
# ------------------------------------------------------------------

MIN_VISIBLE_ZOOM = 12
POLL_INTERVAL_MS = 10_000
STALE_TIMEOUT_MS = 120_000
REQUEST_TIMEOUT_S = 15.0

# ------------------------------------------------------------------
# Geohash tiling
# ------------------------------------------------------------------

TILE_PRECISION = 5
MAX_TILE_PRECISION = 12
# Grid sampling step in degrees (~5 km at the equator).
TILE_SAMPLE_STEP = 0.045
# Upper bound on grid samples for one cover; larger boxes are rejected.
MAX_COVER_SAMPLES = 10_000
