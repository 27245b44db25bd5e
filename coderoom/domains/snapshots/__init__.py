from coderoom.domains.snapshots.entities import Snapshot
from coderoom.domains.snapshots.schemas import (
    SaveSnapshotPayload, GetSnapshotsPayload, RevertToSnapshotPayload, SnapshotResponse
)

__all__ = [
    "Snapshot",
    "SaveSnapshotPayload", "GetSnapshotsPayload", "RevertToSnapshotPayload",
    "SnapshotResponse"
]
