from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request):
    """Проверка работоспособности сервиса"""
    registry = request.app.state.registry
    return {
        "status": "ok",
        "rooms": registry.room_count(),
        "connections": registry.connection_count()
    }
