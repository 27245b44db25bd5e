from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from coderoom.domains.rooms.entities import CodeDocument


class EventPayload(BaseModel):
    """Базовая схема данных входящего события"""
    model_config = ConfigDict(populate_by_name=True)


class RoomPayload(EventPayload):
    room_id: str = Field(..., alias="roomId", max_length=255)

    @field_validator("room_id")
    @classmethod
    def validate_room_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("roomId must not be empty")
        return v


class JoinRoomPayload(RoomPayload):
    user_name: str = Field("Anonymous", alias="userName")


class CodeChangePayload(RoomPayload):
    code: str
    language: Optional[str] = None


class LanguageChangePayload(RoomPayload):
    language: str = Field(..., min_length=1)


class CodeDocumentResponse(BaseModel):
    """Схема ответа с текущим кодом комнаты"""
    room_id: str = Field(..., alias="roomId")
    content: str
    language: str
    updated_at: datetime = Field(..., alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_entity(cls, document: CodeDocument) -> "CodeDocumentResponse":
        return cls(
            room_id=document.room_id,
            content=document.content,
            language=document.language,
            updated_at=document.updated_at
        )
