from typing import List, Optional, Tuple
import uuid

from sqlalchemy.exc import SQLAlchemyError

from coderoom.core.db import Database
from coderoom.db.repositories.code_repository import CodeDocumentRepository
from coderoom.db.repositories.room_repository import RoomRepository
from coderoom.db.repositories.snapshot_repository import SnapshotRepository
from coderoom.domains.rooms.entities import CodeDocument, Room
from coderoom.domains.snapshots.entities import Snapshot

# Ошибки хранилища, которые обработчики событий логируют и не пробрасывают
PERSISTENCE_ERRORS = (SQLAlchemyError, OSError)


class PersistenceGateway:
    """
    Доступ к хранилищу комнат, текущего кода и снимков.

    Каждый вызов открывает собственную сессию, поэтому шлюз можно
    разделять между конкурентными обработчиками соединений.
    """

    def __init__(self, database: Database, default_language: str = "javascript"):
        self.database = database
        self.default_language = default_language

    async def ensure_room(self, room_id: str) -> Tuple[Room, bool]:
        async with self.database.session() as session:
            return await RoomRepository(session).get_or_create(room_id)

    async def get_code(self, room_id: str) -> Optional[CodeDocument]:
        async with self.database.session() as session:
            return await CodeDocumentRepository(session).get_by_room_id(room_id)

    async def save_code(self, room_id: str, content: str, language: Optional[str] = None) -> CodeDocument:
        """Сохранение кода и языка; пустой язык заменяется языком по умолчанию"""
        async with self.database.session() as session:
            return await CodeDocumentRepository(session).upsert(
                room_id,
                content=content,
                language=language or self.default_language,
                default_language=self.default_language
            )

    async def save_language(self, room_id: str, language: str) -> CodeDocument:
        async with self.database.session() as session:
            return await CodeDocumentRepository(session).upsert(
                room_id, language=language, default_language=self.default_language
            )

    async def restore_content(self, room_id: str, content: str) -> CodeDocument:
        """Замена кода комнаты без изменения сохраненного языка"""
        async with self.database.session() as session:
            return await CodeDocumentRepository(session).upsert(
                room_id, content=content, default_language=self.default_language
            )

    async def create_snapshot(self, room_id: str, content: str, author: str) -> Snapshot:
        async with self.database.session() as session:
            return await SnapshotRepository(session).create(room_id, content, author)

    async def list_snapshots(self, room_id: str) -> List[Snapshot]:
        async with self.database.session() as session:
            return await SnapshotRepository(session).get_by_room(room_id)

    async def get_snapshot(self, snapshot_id: str) -> Optional[Snapshot]:
        try:
            snapshot_uuid = uuid.UUID(str(snapshot_id))
        except ValueError:
            return None

        async with self.database.session() as session:
            return await SnapshotRepository(session).get_by_uuid(snapshot_uuid)
