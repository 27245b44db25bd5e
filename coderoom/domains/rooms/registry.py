from typing import Any, Coroutine, Dict, List, Optional, Set
import asyncio
import json
import logging
import uuid

logger = logging.getLogger(__name__)


class Connection:
    """Живое соединение клиента"""

    def __init__(self, websocket, connection_id: Optional[str] = None):
        self.id = connection_id or uuid.uuid4().hex
        self.websocket = websocket
        self.closed = False
        self._tasks: Set[asyncio.Task] = set()

    async def send(self, event: str, data: Dict[str, Any]) -> bool:
        """Отправка события клиенту; False, если соединение уже закрыто"""
        if self.closed:
            return False

        try:
            await self.websocket.send_text(json.dumps({"type": event, "data": data}))
        except Exception as e:
            logger.warning(f"Failed to send {event} to connection {self.id}: {e}")
            self.closed = True
            return False
        return True

    def spawn(self, coro: Coroutine) -> asyncio.Task:
        """Фоновая задача, которая живет не дольше соединения"""
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    def close(self) -> None:
        self.closed = True
        for task in list(self._tasks):
            task.cancel()

    def __repr__(self) -> str:
        return f"Connection(id={self.id})"


class SessionRegistry:
    """
    Учет соединений и их комнат.

    Хранит соответствие room_id -> {connection_id: Connection} и обратное
    connection_id -> {room_id}; оба отображения меняются вместе.
    Состояние живет только в памяти процесса.
    """

    def __init__(self):
        self._connections: Dict[str, Connection] = {}
        self._rooms: Dict[str, Dict[str, Connection]] = {}
        self._memberships: Dict[str, Set[str]] = {}

    def register(self, connection: Connection) -> None:
        self._connections[connection.id] = connection
        self._memberships.setdefault(connection.id, set())

    def get(self, connection_id: str) -> Optional[Connection]:
        return self._connections.get(connection_id)

    def join(self, connection: Connection, room_id: str) -> bool:
        """Добавление соединения в комнату; True только при первом входе"""
        self.register(connection)
        joined = self._memberships[connection.id]
        if room_id in joined:
            return False

        joined.add(room_id)
        self._rooms.setdefault(room_id, {})[connection.id] = connection
        return True

    def members(self, room_id: str, exclude: Optional[str] = None) -> List[Connection]:
        room = self._rooms.get(room_id, {})
        return [
            connection for connection_id, connection in room.items()
            if connection_id != exclude
        ]

    def rooms_of(self, connection_id: str) -> Set[str]:
        return set(self._memberships.get(connection_id, ()))

    def leave_all(self, connection: Connection) -> Set[str]:
        """Удаление соединения из всех комнат; возвращает покинутые комнаты"""
        rooms = self._memberships.pop(connection.id, set())
        for room_id in rooms:
            room = self._rooms.get(room_id)
            if room is None:
                continue
            room.pop(connection.id, None)
            # пустые комнаты не держим в памяти
            if not room:
                del self._rooms[room_id]

        self._connections.pop(connection.id, None)
        return rooms

    def room_count(self) -> int:
        return len(self._rooms)

    def connection_count(self) -> int:
        return len(self._connections)
