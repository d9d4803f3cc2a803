from typing import List

from fastapi import APIRouter, Depends, status

from app.core.auth import CurrentUser, get_current_user, require_admin
from app.schemas.common import DatePath, MessageResponse
from app.schemas.duty import DutyAssign, DutyResponse
from app.services.duty_service import COOKING, MANAGER, DutyService


def build_router(roster: str) -> APIRouter:
    """Routes for one duty roster (cooking or manager)."""
    router = APIRouter()

    @router.get("", response_model=List[DutyResponse])
    async def list_records(current_user: CurrentUser = Depends(get_current_user)):
        return await DutyService.list_all(roster)

    @router.get("/date/{date}", response_model=List[DutyResponse])
    async def list_records_for_date(date: DatePath, current_user: CurrentUser = Depends(get_current_user)):
        return await DutyService.list_for_date(roster, date)

    @router.post("", response_model=DutyResponse, status_code=status.HTTP_201_CREATED)
    async def assign(assign_in: DutyAssign, current_user: CurrentUser = Depends(require_admin)):
        return await DutyService.assign(roster, assign_in)

    @router.delete("/{record_id}", response_model=MessageResponse)
    async def delete_record(record_id: str, current_user: CurrentUser = Depends(require_admin)):
        await DutyService.delete(roster, record_id)
        return MessageResponse(message="Record deleted successfully")

    return router


cooking_router = build_router(COOKING)
manager_router = build_router(MANAGER)
