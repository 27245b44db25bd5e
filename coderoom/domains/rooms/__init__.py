from coderoom.domains.rooms.entities import Room, CodeDocument
from coderoom.domains.rooms.schemas import (
    EventPayload, RoomPayload, JoinRoomPayload, CodeChangePayload,
    LanguageChangePayload, CodeDocumentResponse
)

__all__ = [
    "Room", "CodeDocument",
    "EventPayload", "RoomPayload", "JoinRoomPayload", "CodeChangePayload",
    "LanguageChangePayload", "CodeDocumentResponse"
]
