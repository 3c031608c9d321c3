"""Staff service routers."""

from services.staff_service.routers.roster import router as roster_router
from services.staff_service.routers.sections import router as sections_router
from services.staff_service.routers.tariffs import router as tariffs_router

__all__ = [
    "roster_router",
    "sections_router",
    "tariffs_router",
]
