from typing import List, Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coderoom.db.models.snapshot import Snapshot as SnapshotModel
from coderoom.domains.snapshots.entities import Snapshot


class SnapshotRepository:
    """Репозиторий снимков кода (только добавление)"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, room_id: str, content: str, author: str) -> Snapshot:
        db_snapshot = SnapshotModel(room_id=room_id, content=content, author=author)
        self.session.add(db_snapshot)
        await self.session.commit()
        await self.session.refresh(db_snapshot)
        return self._to_domain(db_snapshot)

    async def get_by_uuid(self, snapshot_uuid: uuid.UUID) -> Optional[Snapshot]:
        result = await self.session.execute(
            select(SnapshotModel).where(SnapshotModel.uuid == snapshot_uuid)
        )
        db_snapshot = result.scalar_one_or_none()
        return self._to_domain(db_snapshot) if db_snapshot else None

    async def get_by_room(self, room_id: str) -> List[Snapshot]:
        """Снимки комнаты, новые первыми"""
        result = await self.session.execute(
            select(SnapshotModel)
            .where(SnapshotModel.room_id == room_id)
            .order_by(SnapshotModel.created_at.desc(), SnapshotModel.id.desc())
        )
        return [self._to_domain(snapshot) for snapshot in result.scalars().all()]

    def _to_domain(self, db_snapshot: SnapshotModel) -> Snapshot:
        return Snapshot(
            id=db_snapshot.uuid,
            room_id=db_snapshot.room_id,
            content=db_snapshot.content,
            author=db_snapshot.author,
            created_at=db_snapshot.created_at
        )
