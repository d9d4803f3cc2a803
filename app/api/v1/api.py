from fastapi import APIRouter
from app.api.v1.endpoints import (
    admin,
    auth,
    duties,
    expenses,
    guest_meals,
    market,
    meals,
    members,
    notifications,
    reports,
    settings,
    summary,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(members.router, prefix="/members", tags=["members"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
api_router.include_router(meals.router, prefix="/meals", tags=["meals"])
api_router.include_router(guest_meals.router, prefix="/guest-meals", tags=["guest-meals"])
api_router.include_router(market.router, prefix="/market", tags=["market"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(summary.router, prefix="/summary", tags=["summary"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(duties.cooking_router, prefix="/cooking", tags=["cooking"])
api_router.include_router(duties.manager_router, prefix="/managers", tags=["managers"])
