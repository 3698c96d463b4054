"""API routers."""

from .executions import router as executions_router
from .health import router as health_router
from .rest import router as rest_router
from .scenarios import router as scenarios_router
from .ws import router as ws_router

__all__ = [
    "executions_router",
    "health_router",
    "rest_router",
    "scenarios_router",
    "ws_router",
]
