from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Snapshot:
    """Неизменяемая копия кода комнаты на момент сохранения"""
    id: UUID
    room_id: str
    content: str
    author: str
    created_at: datetime
