from coderoom.db.repositories.room_repository import RoomRepository
from coderoom.db.repositories.code_repository import CodeDocumentRepository
from coderoom.db.repositories.snapshot_repository import SnapshotRepository

__all__ = [
    "RoomRepository",
    "CodeDocumentRepository",
    "SnapshotRepository"
]
