"""API v1 route modules."""

from printtrack.api.v1.routes.auth import router as auth_router
from printtrack.api.v1.routes.printers import router as printers_router
from printtrack.api.v1.routes.jobs import router as jobs_router
from printtrack.api.v1.routes.maintenance import router as maintenance_router
from printtrack.api.v1.routes.dashboard import router as dashboard_router
from printtrack.api.v1.routes.export import router as export_router
from printtrack.api.v1.routes.octoprint import router as octoprint_router

__all__ = [
    "auth_router",
    "printers_router",
    "jobs_router",
    "maintenance_router",
    "dashboard_router",
    "export_router",
    "octoprint_router",
]
