"""HTTP routers."""

from qcbuddy.api.routes.ask import router as ask_router
from qcbuddy.api.routes.health import router as health_router
from qcbuddy.api.routes.tags import router as tags_router

__all__ = ["ask_router", "health_router", "tags_router"]
