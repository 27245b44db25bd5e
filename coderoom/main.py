from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coderoom.api.http.health import router as health_router
from coderoom.api.http.rooms import router as rooms_router
from coderoom.api.ws.dispatcher import EventDispatcher
from coderoom.api.ws.sync import router as websocket_router
from coderoom.core.config import Settings
from coderoom.core.db import Database
from coderoom.core.logging import configure_logging
from coderoom.domains.execution.services import ExecutionService
from coderoom.domains.rooms.registry import SessionRegistry
from coderoom.domains.rooms.services import RoomService
from coderoom.domains.snapshots.services import SnapshotService
from coderoom.infrastructure.gateway import PersistenceGateway


def create_app(settings: Optional[Settings] = None, http_transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """Сборка приложения; все сервисы создаются и закрываются в lifespan"""
    settings = settings or Settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings.database_url, echo=settings.database_echo)
        await database.init()
        client = httpx.AsyncClient(timeout=settings.execution_request_timeout, transport=http_transport)

        registry = SessionRegistry()
        gateway = PersistenceGateway(database, settings.default_language)
        rooms = RoomService(registry, gateway, settings)
        snapshots = SnapshotService(gateway, rooms)
        execution = ExecutionService(settings, client)

        app.state.settings = settings
        app.state.database = database
        app.state.registry = registry
        app.state.gateway = gateway
        app.state.rooms = rooms
        app.state.dispatcher = EventDispatcher(rooms, snapshots, execution)
        try:
            yield
        finally:
            await rooms.drain()
            await client.aclose()
            await database.dispose()

    app = FastAPI(
        title="CodeRoom",
        description="Комнаты совместного редактирования и запуска кода",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(rooms_router)
    app.include_router(websocket_router)

    @app.get("/")
    async def root():
        return {
            "message": "CodeRoom API",
            "websocket": "/ws",
            "docs": "/docs"
        }

    return app


app = create_app()
