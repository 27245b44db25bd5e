from typing import Any, Dict, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coderoom.db.base import utcnow
from coderoom.db.models.code import CodeDocument as CodeDocumentModel
from coderoom.domains.rooms.entities import CodeDocument


class CodeDocumentRepository:
    """Репозиторий текущего кода комнат (last-writer-wins)"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_room_id(self, room_id: str) -> Optional[CodeDocument]:
        result = await self.session.execute(
            select(CodeDocumentModel).where(CodeDocumentModel.room_id == room_id)
        )
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def upsert(
        self,
        room_id: str,
        content: Optional[str] = None,
        language: Optional[str] = None,
        default_language: str = "javascript"
    ) -> CodeDocument:
        """
        Обновление документа комнаты или его создание.

        Поля со значением None не меняются у существующей записи; при
        создании вместо них берутся пустой код и язык по умолчанию.
        """
        values: Dict[str, Any] = {"updated_at": utcnow()}
        if content is not None:
            values["content"] = content
        if language is not None:
            values["language"] = language

        result = await self._update(room_id, values)
        if result.rowcount == 0:
            self.session.add(CodeDocumentModel(
                room_id=room_id,
                content=content if content is not None else "",
                language=language or default_language
            ))
            try:
                await self.session.commit()
            except IntegrityError:
                # запись вставил параллельный писатель, перезаписываем ее
                await self.session.rollback()
                await self._update(room_id, values)
                await self.session.commit()
        else:
            await self.session.commit()

        return await self.get_by_room_id(room_id)

    async def _update(self, room_id: str, values: Dict[str, Any]):
        return await self.session.execute(
            update(CodeDocumentModel)
            .where(CodeDocumentModel.room_id == room_id)
            .values(**values)
        )

    def _to_domain(self, db_document: CodeDocumentModel) -> CodeDocument:
        return CodeDocument(
            room_id=db_document.room_id,
            content=db_document.content,
            language=db_document.language,
            updated_at=db_document.updated_at
        )
