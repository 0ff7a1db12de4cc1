"""In-memory snapshot cache."""

from market_data_api.cache.snapshot import Snapshot, SnapshotCache

__all__ = ["Snapshot", "SnapshotCache"]
