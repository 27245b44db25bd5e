from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from coderoom.domains.rooms.schemas import RoomPayload
from coderoom.domains.snapshots.entities import Snapshot


class SaveSnapshotPayload(RoomPayload):
    code: str
    user_name: str = Field(..., alias="userName")


class GetSnapshotsPayload(RoomPayload):
    pass


class RevertToSnapshotPayload(RoomPayload):
    snapshot_id: str = Field(..., alias="snapshotId", min_length=1)


class SnapshotResponse(BaseModel):
    """Схема снимка в списке снимков комнаты"""
    id: str
    room_id: str = Field(..., alias="roomId")
    content: str
    user_name: str = Field(..., alias="userName")
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_entity(cls, snapshot: Snapshot) -> "SnapshotResponse":
        return cls(
            id=str(snapshot.id),
            room_id=snapshot.room_id,
            content=snapshot.content,
            user_name=snapshot.author,
            created_at=snapshot.created_at
        )
