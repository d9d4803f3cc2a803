from enum import Enum
from app.models.base import MongoModel


class MealType(str, Enum):
    LUNCH = "lunch"
    DINNER = "dinner"


class GuestMealType(str, Enum):
    FISH = "fish"
    EGG = "egg"
    VEG = "veg"
    MEAT = "meat"


class Meal(MongoModel):
    """Presence of a record means the member ate that meal."""
    date: str
    member_id: str
    member_name: str = ""
    meal_type: MealType


class GuestMeal(MongoModel):
    """A meal served to a guest, billed to the hosting member."""
    date: str
    member_id: str
    member_name: str = ""
    guest_meal_type: GuestMealType
    meal_time: MealType
