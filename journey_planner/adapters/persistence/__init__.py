from .local_snapshot_repository import LocalSnapshotRepository

__all__ = ["LocalSnapshotRepository"]
