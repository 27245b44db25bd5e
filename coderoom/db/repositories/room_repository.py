from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coderoom.db.models.room import Room as RoomModel
from coderoom.domains.rooms.entities import Room


class RoomRepository:
    """Репозиторий для работы с комнатами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_room_id(self, room_id: str) -> Optional[Room]:
        result = await self.session.execute(
            select(RoomModel).where(RoomModel.room_id == room_id)
        )
        db_room = result.scalar_one_or_none()
        return self._to_domain(db_room) if db_room else None

    async def get_or_create(self, room_id: str) -> Tuple[Room, bool]:
        """Получение комнаты или ее создание при первом входе"""
        existing = await self.get_by_room_id(room_id)
        if existing:
            return existing, False

        db_room = RoomModel(room_id=room_id)
        self.session.add(db_room)
        try:
            await self.session.commit()
        except IntegrityError:
            # комнату успел создать параллельный вход
            await self.session.rollback()
            existing = await self.get_by_room_id(room_id)
            if existing is None:
                raise
            return existing, False

        await self.session.refresh(db_room)
        return self._to_domain(db_room), True

    def _to_domain(self, db_room: RoomModel) -> Room:
        return Room(room_id=db_room.room_id, created_at=db_room.created_at)
