# tests/helpers.py
# Поддельный WebSocket, недоступное хранилище и выборка полученных событий.

import asyncio
import json
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import OperationalError

from coderoom.domains.rooms.registry import Connection


class FakeWebSocket:
    """WebSocket, который складывает отправленные сообщения в список"""

    def __init__(self):
        self.messages: List[Dict[str, Any]] = []
        self.broken = False

    async def send_text(self, text: str) -> None:
        if self.broken:
            raise RuntimeError("Cannot call send once a close message has been sent.")
        self.messages.append(json.loads(text))


class StalledWebSocket(FakeWebSocket):
    """WebSocket, отправка которого зависает, пока включен stalled"""

    def __init__(self):
        super().__init__()
        self.stalled = False
        self.started = asyncio.Event()

    async def send_text(self, text: str) -> None:
        if self.stalled:
            self.started.set()
            await asyncio.sleep(3600)
        await super().send_text(text)


def received(connection: Connection, event: Optional[str] = None) -> List[Dict[str, Any]]:
    """Данные событий, полученных соединением (при необходимости одного типа)"""
    return [
        message["data"] for message in connection.websocket.messages
        if event is None or message["type"] == event
    ]


def event_types(connection: Connection) -> List[str]:
    return [message["type"] for message in connection.websocket.messages]


class UnavailableGateway:
    """Шлюз, у которого хранилище всегда недоступно"""

    default_language = "javascript"

    def _fail(self):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("store is down"))

    async def ensure_room(self, room_id):
        self._fail()

    async def get_code(self, room_id):
        self._fail()

    async def save_code(self, room_id, content, language=None):
        self._fail()

    async def save_language(self, room_id, language):
        self._fail()

    async def restore_content(self, room_id, content):
        self._fail()

    async def create_snapshot(self, room_id, content, author):
        self._fail()

    async def list_snapshots(self, room_id):
        self._fail()

    async def get_snapshot(self, snapshot_id):
        self._fail()
