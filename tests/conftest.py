# tests/conftest.py
# Общие фикстуры: настройки с sqlite во временном каталоге, сервисы комнат
# и соединения с поддельным WebSocket.

from typing import Optional

import pytest

from coderoom.core.config import Settings
from coderoom.core.db import Database
from coderoom.domains.rooms.registry import Connection, SessionRegistry
from coderoom.domains.rooms.services import RoomService
from coderoom.domains.snapshots.services import SnapshotService
from coderoom.infrastructure.gateway import PersistenceGateway
from tests.helpers import FakeWebSocket


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'coderoom.db'}",
        rapidapi_key=None,
        execution_poll_interval=0,
        execution_max_polls=5,
        log_level="DEBUG",
    )


@pytest.fixture
async def database(settings):
    database = Database(settings.database_url)
    await database.init()
    yield database
    await database.dispose()


@pytest.fixture
def gateway(database, settings) -> PersistenceGateway:
    return PersistenceGateway(database, settings.default_language)


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def rooms(registry, gateway, settings) -> RoomService:
    return RoomService(registry, gateway, settings)


@pytest.fixture
def snapshots(gateway, rooms) -> SnapshotService:
    return SnapshotService(gateway, rooms)


@pytest.fixture
def connect(registry):
    """Фабрика зарегистрированных соединений"""
    def _connect(connection_id: Optional[str] = None) -> Connection:
        connection = Connection(FakeWebSocket(), connection_id=connection_id)
        registry.register(connection)
        return connection
    return _connect
