from coderoom.api.http.health import router as health_router
from coderoom.api.http.rooms import router as rooms_router

__all__ = [
    "health_router",
    "rooms_router"
]
