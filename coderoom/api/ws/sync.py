from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import logging

from coderoom.domains.rooms.registry import Connection

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket эндпоинт комнат совместного редактирования"""
    state = websocket.app.state
    await websocket.accept()

    connection = Connection(websocket)
    state.registry.register(connection)
    logger.info(f"A user connected with Id: {connection.id}")

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))

            text = message.get("text")
            if text is None:
                # бинарные кадры протоколом не предусмотрены
                await state.dispatcher.reject(connection, "Malformed message: expected a text frame.")
                continue

            await state.dispatcher.dispatch(connection, text)
    except WebSocketDisconnect:
        logger.info(f"WebSocket closed by client {connection.id}")
    finally:
        await state.rooms.disconnect(connection)
