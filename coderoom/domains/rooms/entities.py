from dataclasses import dataclass
from datetime import datetime


@dataclass
class Room:
    room_id: str
    created_at: datetime


@dataclass
class CodeDocument:
    """Последнее сохраненное состояние редактора комнаты"""
    room_id: str
    content: str
    language: str
    updated_at: datetime
