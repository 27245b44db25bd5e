import logging

from coderoom.domains import events
from coderoom.domains.rooms.registry import Connection
from coderoom.domains.rooms.services import RoomService
from coderoom.domains.snapshots.schemas import SnapshotResponse
from coderoom.infrastructure.gateway import PERSISTENCE_ERRORS, PersistenceGateway

logger = logging.getLogger(__name__)


class SnapshotService:
    """Сохранение, просмотр и откат снимков кода комнаты"""

    def __init__(self, gateway: PersistenceGateway, rooms: RoomService):
        self.gateway = gateway
        self.rooms = rooms

    async def create(self, connection: Connection, room_id: str, code: str, user_name: str) -> bool:
        if not code or not user_name:
            logger.warning(f"Rejected empty snapshot for room {room_id} from {connection.id}")
            await connection.send(events.SNAPSHOT_ERROR, {"message": "Failed to save snapshot."})
            return False

        try:
            await self.gateway.create_snapshot(room_id, code, user_name)
        except PERSISTENCE_ERRORS:
            logger.exception(
                "Error saving snapshot",
                extra={"room_id": room_id, "connection_id": connection.id, "event": events.SAVE_SNAPSHOT}
            )
            await connection.send(events.SNAPSHOT_ERROR, {"message": "Failed to save snapshot."})
            return False

        logger.info(f"Snapshot saved for room {room_id} by {user_name}")
        await connection.send(events.SNAPSHOT_SAVED, {"message": "Snapshot saved successfully!"})
        return True

    async def list_snapshots(self, connection: Connection, room_id: str) -> None:
        try:
            snapshots = await self.gateway.list_snapshots(room_id)
        except PERSISTENCE_ERRORS:
            logger.exception(
                "Error fetching snapshots",
                extra={"room_id": room_id, "connection_id": connection.id, "event": events.GET_SNAPSHOTS}
            )
            await connection.send(events.SNAPSHOTS_ERROR, {"message": "Failed to fetch snapshots."})
            return

        await connection.send(events.SNAPSHOTS_LIST, {
            "snapshots": [
                SnapshotResponse.from_entity(snapshot).model_dump(by_alias=True, mode="json")
                for snapshot in snapshots
            ]
        })

    async def revert(self, connection: Connection, room_id: str, snapshot_id: str) -> bool:
        """
        Откат комнаты к снимку.

        Код снимка рассылается всем участникам комнаты, включая
        инициатора, и становится текущим кодом комнаты в хранилище.
        Отсутствующий снимок отклоняется событием snapshot-error.
        """
        context = {"room_id": room_id, "connection_id": connection.id, "event": events.REVERT_TO_SNAPSHOT}
        try:
            snapshot = await self.gateway.get_snapshot(snapshot_id)
        except PERSISTENCE_ERRORS:
            logger.exception("Error reverting to snapshot", extra=context)
            await connection.send(events.SNAPSHOT_ERROR, {"message": "Failed to revert to snapshot."})
            return False

        if snapshot is None or snapshot.room_id != room_id:
            logger.warning(f"Snapshot {snapshot_id} not found for room {room_id}")
            await connection.send(events.SNAPSHOT_ERROR, {"message": "Snapshot not found."})
            return False

        await self.rooms.broadcast(room_id, events.CODE_CHANGE, {"code": snapshot.content})
        logger.info(f"Room {room_id} reverted to snapshot: {snapshot_id}")

        try:
            await self.gateway.restore_content(room_id, snapshot.content)
        except PERSISTENCE_ERRORS:
            logger.exception("Error saving reverted code", extra=context)
            await connection.send(events.SNAPSHOT_ERROR, {"message": "Failed to revert to snapshot."})
            return False
        return True
