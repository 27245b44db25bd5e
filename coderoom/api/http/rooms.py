from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from coderoom.domains.rooms.schemas import CodeDocumentResponse
from coderoom.domains.snapshots.schemas import SnapshotResponse
from coderoom.infrastructure.gateway import PersistenceGateway

router = APIRouter(prefix="/rooms", tags=["rooms"])


def get_gateway(request: Request) -> PersistenceGateway:
    return request.app.state.gateway


@router.get("/{room_id}/code", response_model=CodeDocumentResponse)
async def get_room_code(room_id: str, gateway: PersistenceGateway = Depends(get_gateway)):
    """Текущий код комнаты"""
    document = await gateway.get_code(room_id)
    if document is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Room code not found"
        )
    return CodeDocumentResponse.from_entity(document)


@router.get("/{room_id}/snapshots", response_model=List[SnapshotResponse])
async def list_room_snapshots(room_id: str, gateway: PersistenceGateway = Depends(get_gateway)):
    """Снимки комнаты, новые первыми"""
    snapshots = await gateway.list_snapshots(room_id)
    return [SnapshotResponse.from_entity(snapshot) for snapshot in snapshots]
