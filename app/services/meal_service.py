import logging
from typing import List, Optional

from fastapi import HTTPException, status
from pymongo.errors import DuplicateKeyError

from app.core.auth import CurrentUser
from app.db.session import get_database, to_object_id
from app.models.meal import GuestMeal, Meal
from app.schemas.meal import GuestMealCreate, MealCreate, MealDelete
from app.services.member_service import MemberService
from app.services.settings_service import SettingsService
from app.utils.validation import month_regex

logger = logging.getLogger(__name__)


def _date_query(date: Optional[str], month: Optional[str]) -> dict:
    if date:
        return {"date": date}
    if month:
        return {"date": {"$regex": month_regex(month)}}
    return {}


def _require_owner(current_user: CurrentUser, member_id: str, action: str) -> None:
    if not current_user.is_admin and not current_user.owns(member_id):
        logger.warning("Member %s tried to %s for %s", current_user.id, action, member_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied. You can only {action} for yourself."
        )


class MealService:
    @staticmethod
    async def list_all(date: Optional[str] = None, month: Optional[str] = None) -> List[Meal]:
        db = await get_database()
        docs = await db.meals.find(_date_query(date, month)).to_list(None)
        return [Meal(**doc) for doc in docs]

    @staticmethod
    async def add(meal_in: MealCreate, current_user: CurrentUser) -> Meal:
        _require_owner(current_user, meal_in.member_id, "record meals")
        db = await get_database()
        member = await MemberService.get(meal_in.member_id)

        meal = Meal(
            date=meal_in.date,
            member_id=str(member.id),
            member_name=member.name,
            meal_type=meal_in.meal_type,
        )
        try:
            await db.meals.insert_one(meal.to_document())
        except DuplicateKeyError:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Meal already exists")
        logger.info("Meal %s %s recorded for %s", meal.date, meal.meal_type, meal.member_id)
        return meal

    @staticmethod
    async def remove(meal_in: MealDelete, current_user: CurrentUser) -> None:
        _require_owner(current_user, meal_in.member_id, "remove meals")
        db = await get_database()
        member = await MemberService.get(meal_in.member_id)
        result = await db.meals.delete_one({
            "date": meal_in.date,
            "member_id": {"$in": sorted(member.identifiers())},
            "meal_type": meal_in.meal_type.value,
        })
        if result.deleted_count == 0:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found")
        logger.info("Meal %s %s removed for %s", meal_in.date, meal_in.meal_type.value, member.id)

    @staticmethod
    async def clear_all(password: str) -> int:
        await SettingsService.require_password("clear_all_meals_password", password)
        db = await get_database()
        result = await db.meals.delete_many({})
        logger.info("Cleared %d meals", result.deleted_count)
        return result.deleted_count


class GuestMealService:
    @staticmethod
    async def list_all(date: Optional[str] = None, month: Optional[str] = None) -> List[GuestMeal]:
        db = await get_database()
        docs = await db.guest_meals.find(_date_query(date, month)).sort("created_at", -1).to_list(None)
        return [GuestMeal(**doc) for doc in docs]

    @staticmethod
    async def add(guest_in: GuestMealCreate, current_user: CurrentUser) -> GuestMeal:
        _require_owner(current_user, guest_in.member_id, "record guest meals")
        db = await get_database()
        member = await MemberService.get(guest_in.member_id)

        guest_meal = GuestMeal(
            date=guest_in.date,
            member_id=str(member.id),
            member_name=member.name,
            guest_meal_type=guest_in.guest_meal_type,
            meal_time=guest_in.meal_time,
        )
        await db.guest_meals.insert_one(guest_meal.to_document())
        logger.info(
            "Guest meal %s (%s, %s) hosted by %s",
            guest_meal.date, guest_meal.guest_meal_type, guest_meal.meal_time, guest_meal.member_id
        )
        return guest_meal

    @staticmethod
    async def remove(guest_meal_id: str, current_user: CurrentUser) -> None:
        db = await get_database()
        oid = to_object_id(guest_meal_id)

        doc = await db.guest_meals.find_one({"_id": oid})
        if not doc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guest meal not found")
        _require_owner(current_user, doc["member_id"], "remove guest meals")

        await db.guest_meals.delete_one({"_id": oid})
        logger.info("Guest meal %s removed", guest_meal_id)

    @staticmethod
    async def clear_all(password: str) -> int:
        await SettingsService.require_password("clear_guests_password", password)
        db = await get_database()
        result = await db.guest_meals.delete_many({})
        logger.info("Cleared %d guest meals", result.deleted_count)
        return result.deleted_count
