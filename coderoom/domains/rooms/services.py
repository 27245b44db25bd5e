from typing import Any, Coroutine, Dict, Optional, Set
import asyncio
import logging

from coderoom.core.config import Settings
from coderoom.domains import events
from coderoom.domains.rooms.registry import Connection, SessionRegistry
from coderoom.infrastructure.gateway import PERSISTENCE_ERRORS, PersistenceGateway

logger = logging.getLogger(__name__)


class RoomService:
    """
    Рассылка событий комнаты и согласование ее текущего кода.

    Рассылка другим участникам не ждет записи в хранилище: запись
    запускается фоновой задачей после того, как все участники получили
    событие. Конфликты записей разрешаются по правилу last-writer-wins.
    """

    def __init__(self, registry: SessionRegistry, gateway: PersistenceGateway, settings: Settings):
        self.registry = registry
        self.gateway = gateway
        self.settings = settings
        self._pending: Set[asyncio.Task] = set()

    async def broadcast(
        self,
        room_id: str,
        event: str,
        data: Dict[str, Any],
        exclude: Optional[str] = None
    ) -> int:
        """Рассылка события участникам комнаты; возвращает число доставок"""
        delivered = 0
        for connection in self.registry.members(room_id, exclude=exclude):
            if await connection.send(event, data):
                delivered += 1
        return delivered

    async def join(self, connection: Connection, room_id: str, user_name: str) -> None:
        """Вход в комнату и отправка текущего кода новому участнику"""
        self.registry.join(connection, room_id)
        logger.info(f"User with ID: {connection.id} joined room: {room_id}")

        await self.broadcast(room_id, events.USER_JOINED, {
            "userId": connection.id,
            "userName": user_name,
            "message": f"{user_name} has joined the room"
        }, exclude=connection.id)

        try:
            _, created = await self.gateway.ensure_room(room_id)
            if created:
                logger.info(f"Room created in DB: {room_id}")
            document = await self.gateway.get_code(room_id)
        except PERSISTENCE_ERRORS:
            # вход состоялся, участник просто увидит пустой редактор
            logger.exception(
                "Error joining room",
                extra={"room_id": room_id, "connection_id": connection.id, "event": events.JOIN_ROOM}
            )
            return

        if document is not None:
            await connection.send(events.CODE_CHANGE, {"code": document.content})
            await connection.send(events.LANGUAGE_CHANGE, {"language": document.language})

    async def change_code(
        self,
        connection: Connection,
        room_id: str,
        code: str,
        language: Optional[str] = None
    ) -> None:
        await self.broadcast(room_id, events.CODE_CHANGE, {"code": code}, exclude=connection.id)
        self._schedule(
            self.gateway.save_code(room_id, code, language),
            room_id=room_id,
            connection_id=connection.id,
            event=events.CODE_CHANGE
        )

    async def change_language(self, connection: Connection, room_id: str, language: str) -> None:
        await self.broadcast(room_id, events.LANGUAGE_CHANGE, {"language": language}, exclude=connection.id)
        if self.settings.persist_language_changes:
            self._schedule(
                self.gateway.save_language(room_id, language),
                room_id=room_id,
                connection_id=connection.id,
                event=events.LANGUAGE_CHANGE
            )

    async def disconnect(self, connection: Connection) -> None:
        """Удаление соединения и уведомление оставшихся участников его комнат"""
        # учет снимается до первой точки ожидания: отмена рассылки его не прерывает
        rooms = self.registry.leave_all(connection)
        connection.close()
        logger.info(f"User disconnected: {connection.id}")

        for room_id in rooms:
            await self.broadcast(room_id, events.USER_LEFT, {
                "userId": connection.id,
                "message": f"User {connection.id} has left the room."
            })

    async def drain(self) -> None:
        """Ожидание всех незавершенных фоновых записей"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _schedule(self, write: Coroutine, **context: str) -> None:
        task = asyncio.create_task(self._persist(write, context))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _persist(self, write: Coroutine, context: Dict[str, str]) -> None:
        try:
            await write
        except PERSISTENCE_ERRORS:
            # рассылка уже состоялась, клиентам об ошибке не сообщаем
            logger.exception("Error saving room code", extra=context)
