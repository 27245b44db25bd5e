from coderoom.db.models.room import Room
from coderoom.db.models.code import CodeDocument
from coderoom.db.models.snapshot import Snapshot

__all__ = [
    "Room",
    "CodeDocument",
    "Snapshot"
]
