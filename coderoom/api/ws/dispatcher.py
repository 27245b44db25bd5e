from typing import Any, Awaitable, Callable, Dict, Tuple, Type
import json
import logging

from pydantic import ValidationError

from coderoom.domains import events
from coderoom.domains.execution.schemas import RunCodePayload
from coderoom.domains.execution.services import ExecutionService
from coderoom.domains.rooms.registry import Connection
from coderoom.domains.rooms.schemas import (
    CodeChangePayload, EventPayload, JoinRoomPayload, LanguageChangePayload
)
from coderoom.domains.rooms.services import RoomService
from coderoom.domains.snapshots.schemas import (
    GetSnapshotsPayload, RevertToSnapshotPayload, SaveSnapshotPayload
)
from coderoom.domains.snapshots.services import SnapshotService

logger = logging.getLogger(__name__)

Handler = Callable[[Connection, Any], Awaitable[None]]


class EventDispatcher:
    """Маршрутизация входящих событий соединения по сервисам"""

    def __init__(self, rooms: RoomService, snapshots: SnapshotService, execution: ExecutionService):
        self.rooms = rooms
        self.snapshots = snapshots
        self.execution = execution
        self.handlers: Dict[str, Tuple[Type[EventPayload], Handler]] = {
            events.JOIN_ROOM: (JoinRoomPayload, self._join_room),
            events.CODE_CHANGE: (CodeChangePayload, self._code_change),
            events.LANGUAGE_CHANGE: (LanguageChangePayload, self._language_change),
            events.RUN_CODE: (RunCodePayload, self._run_code),
            events.SAVE_SNAPSHOT: (SaveSnapshotPayload, self._save_snapshot),
            events.GET_SNAPSHOTS: (GetSnapshotsPayload, self._get_snapshots),
            events.REVERT_TO_SNAPSHOT: (RevertToSnapshotPayload, self._revert_to_snapshot),
        }

    async def dispatch(self, connection: Connection, raw: str) -> None:
        """
        Обработка одного сообщения клиента.

        Сообщение имеет вид {"type": <событие>, "data": {...}}. Ошибки
        разбора, проверки и обработки отправляются только отправителю
        событием error и никогда не закрывают соединение.
        """
        try:
            message = json.loads(raw)
        except ValueError:
            await self.reject(connection, "Malformed message: expected JSON.")
            return

        if not isinstance(message, dict):
            await self.reject(connection, "Malformed message: expected an object.")
            return

        event = message.get("type")
        if not isinstance(event, str):
            await self.reject(connection, "Malformed message: expected a string type.")
            return

        if event == events.PING:
            await connection.send(events.PONG, {})
            return

        if event not in self.handlers:
            await self.reject(connection, f"Unknown event: {event}")
            return

        schema, handler = self.handlers[event]
        try:
            payload = schema.model_validate(message.get("data") or {})
        except ValidationError as e:
            logger.info(f"Invalid {event} payload from {connection.id}: {e.error_count()} errors")
            await self.reject(connection, f"Invalid payload for {event}.", e.errors(include_url=False, include_input=False))
            return

        try:
            await handler(connection, payload)
        except Exception:
            logger.exception(
                f"Unhandled error in {event} handler",
                extra={"connection_id": connection.id, "event": event}
            )
            await self.reject(connection, f"Failed to handle {event}.")

    async def reject(self, connection: Connection, message: str, details: Any = None) -> None:
        data: Dict[str, Any] = {"message": message}
        if details is not None:
            data["details"] = json.loads(json.dumps(details, default=str))
        await connection.send(events.ERROR, data)

    async def _join_room(self, connection: Connection, payload: JoinRoomPayload) -> None:
        await self.rooms.join(connection, payload.room_id, payload.user_name)

    async def _code_change(self, connection: Connection, payload: CodeChangePayload) -> None:
        await self.rooms.change_code(connection, payload.room_id, payload.code, payload.language)

    async def _language_change(self, connection: Connection, payload: LanguageChangePayload) -> None:
        await self.rooms.change_language(connection, payload.room_id, payload.language)

    async def _run_code(self, connection: Connection, payload: RunCodePayload) -> None:
        # опрос Judge0 не блокирует прием следующих событий соединения
        connection.spawn(self._execute(connection, payload))

    async def _execute(self, connection: Connection, payload: RunCodePayload) -> None:
        try:
            result = await self.execution.run(payload.code, payload.language_id)
        except Exception:
            logger.exception(
                "Unhandled error in run-code task",
                extra={"connection_id": connection.id, "event": events.RUN_CODE}
            )
            await self.reject(connection, f"Failed to handle {events.RUN_CODE}.")
            return
        await connection.send(events.CODE_OUTPUT, result.to_payload())

    async def _save_snapshot(self, connection: Connection, payload: SaveSnapshotPayload) -> None:
        await self.snapshots.create(connection, payload.room_id, payload.code, payload.user_name)

    async def _get_snapshots(self, connection: Connection, payload: GetSnapshotsPayload) -> None:
        await self.snapshots.list_snapshots(connection, payload.room_id)

    async def _revert_to_snapshot(self, connection: Connection, payload: RevertToSnapshotPayload) -> None:
        await self.snapshots.revert(connection, payload.room_id, payload.snapshot_id)
