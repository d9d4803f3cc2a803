from pydantic import BaseModel, ConfigDict

from app.models.meal import GuestMealType, MealType
from app.schemas.common import DocumentId, IsoDate


class MealCreate(BaseModel):
    date: IsoDate
    member_id: str
    meal_type: MealType


class MealDelete(BaseModel):
    date: IsoDate
    member_id: str
    meal_type: MealType


class MealResponse(BaseModel):
    id: DocumentId
    date: str
    member_id: str
    member_name: str
    meal_type: str

    model_config = ConfigDict(populate_by_name=True)


class GuestMealCreate(BaseModel):
    date: IsoDate
    member_id: str
    guest_meal_type: GuestMealType
    meal_time: MealType


class GuestMealResponse(BaseModel):
    id: DocumentId
    date: str
    member_id: str
    member_name: str
    guest_meal_type: str
    meal_time: str

    model_config = ConfigDict(populate_by_name=True)
