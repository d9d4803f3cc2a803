from typing import List

from fastapi import APIRouter, Depends, status

from app.core.auth import CurrentUser, get_current_user, require_admin
from app.schemas.common import DateQuery, DeletedCountResponse, MessageResponse, MonthQuery, PasswordConfirm
from app.schemas.meal import MealCreate, MealDelete, MealResponse
from app.services.meal_service import MealService

router = APIRouter()


@router.get("", response_model=List[MealResponse])
async def list_meals(
    date: DateQuery = None,
    month: MonthQuery = None,
    current_user: CurrentUser = Depends(get_current_user)
):
    return await MealService.list_all(date, month)


@router.post("", response_model=MealResponse, status_code=status.HTTP_201_CREATED)
async def add_meal(meal_in: MealCreate, current_user: CurrentUser = Depends(get_current_user)):
    """Mark a meal eaten. Members may only mark their own."""
    return await MealService.add(meal_in, current_user)


@router.delete("/clear-all", response_model=DeletedCountResponse)
async def clear_all_meals(
    confirm: PasswordConfirm,
    current_user: CurrentUser = Depends(require_admin)
):
    deleted = await MealService.clear_all(confirm.password)
    return DeletedCountResponse(message=f"Deleted {deleted} meals", deleted_count=deleted)


@router.delete("", response_model=MessageResponse)
async def remove_meal(meal_in: MealDelete, current_user: CurrentUser = Depends(get_current_user)):
    await MealService.remove(meal_in, current_user)
    return MessageResponse(message="Meal removed successfully")
