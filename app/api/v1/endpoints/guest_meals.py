from typing import List

from fastapi import APIRouter, Depends, status

from app.core.auth import CurrentUser, get_current_user, require_admin
from app.schemas.common import DateQuery, DeletedCountResponse, MessageResponse, MonthQuery, PasswordConfirm
from app.schemas.meal import GuestMealCreate, GuestMealResponse
from app.services.meal_service import GuestMealService

router = APIRouter()


@router.get("", response_model=List[GuestMealResponse])
async def list_guest_meals(
    date: DateQuery = None,
    month: MonthQuery = None,
    current_user: CurrentUser = Depends(get_current_user)
):
    return await GuestMealService.list_all(date, month)


@router.post("", response_model=GuestMealResponse, status_code=status.HTTP_201_CREATED)
async def add_guest_meal(
    guest_in: GuestMealCreate,
    current_user: CurrentUser = Depends(get_current_user)
):
    return await GuestMealService.add(guest_in, current_user)


@router.delete("/clear-all/confirm", response_model=DeletedCountResponse)
async def clear_all_guest_meals(
    confirm: PasswordConfirm,
    current_user: CurrentUser = Depends(require_admin)
):
    deleted = await GuestMealService.clear_all(confirm.password)
    return DeletedCountResponse(message=f"Deleted {deleted} guest meals", deleted_count=deleted)


@router.delete("/{guest_meal_id}", response_model=MessageResponse)
async def remove_guest_meal(
    guest_meal_id: str,
    current_user: CurrentUser = Depends(get_current_user)
):
    await GuestMealService.remove(guest_meal_id, current_user)
    return MessageResponse(message="Guest meal removed successfully")
