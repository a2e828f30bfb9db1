from .snapshot_repository import INetworkSnapshotRepository

__all__ = ["INetworkSnapshotRepository"]
