from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.core.auth import CurrentUser, require_admin
from app.schemas.admin import ClearMonthPreview, ClearMonthRequest, ClearMonthResult
from app.schemas.auth import AdminCredentials, AdminPasswordChange
from app.services.admin_service import AdminService
from app.services.auth_service import AuthService
from app.utils.validation import MONTH_PATTERN

router = APIRouter()


@router.get("/credentials", response_model=AdminCredentials)
async def get_credentials(current_user: CurrentUser = Depends(require_admin)):
    """Admin username (never the password)"""
    return AdminCredentials(username=await AuthService.admin_username())


@router.put("/change-password", response_model=AdminCredentials)
async def change_password(
    change: AdminPasswordChange,
    current_user: CurrentUser = Depends(require_admin)
):
    username = await AuthService.change_admin_password(change)
    return AdminCredentials(username=username)


@router.get("/clear-month/preview", response_model=ClearMonthPreview)
async def clear_month_preview(
    month: Annotated[str, Query(pattern=MONTH_PATTERN)],
    current_user: CurrentUser = Depends(require_admin)
):
    """Count what a month clear would delete"""
    return await AdminService.clear_month_preview(month)


@router.delete("/clear-month", response_model=ClearMonthResult)
async def clear_month(
    request: ClearMonthRequest,
    current_user: CurrentUser = Depends(require_admin)
):
    return await AdminService.clear_month(request.month, request.password)
