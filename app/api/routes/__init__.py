from app.api.routes.auth import router as auth_router
from app.api.routes.users import router as users_router
from app.api.routes.properties import houses_router, rooms_router
from app.api.routes.tenants import router as tenants_router
from app.api.routes.rents import router as rents_router
from app.api.routes.monthly_services import router as monthly_services_router
from app.api.routes.maintenance import (
    issues_router as maintenance_issues_router,
    requests_router as maintenance_requests_router,
)
from app.api.routes.payments import router as payments_router
from app.api.routes.reports import balances_router, contracts_router, reports_router

__all__ = [
    "auth_router",
    "users_router",
    "houses_router",
    "rooms_router",
    "tenants_router",
    "rents_router",
    "monthly_services_router",
    "maintenance_issues_router",
    "maintenance_requests_router",
    "payments_router",
    "balances_router",
    "contracts_router",
    "reports_router",
]
