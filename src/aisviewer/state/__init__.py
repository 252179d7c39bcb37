"""State/store layer.

The store is the single place where fetched vessels are merged, swept
for staleness and exposed to readers as immutable snapshots.
"""

from aisviewer.state.store import SnapshotListener, VesselSnapshot, VesselStore

__all__ = ["SnapshotListener", "VesselSnapshot", "VesselStore"]
