from enum import Enum
from typing import List
from pydantic import Field
from app.models.base import MongoModel


class ExpenseCategory(str, Enum):
    MARKET = "market"
    SPICES = "spices"
    RICE = "rice"
    OTHERS = "others"
    GAS = "gas"
    WIFI = "wifi"
    ELECTRIC = "electric"
    PAPER = "paper"
    DIDI = "didi"
    HOUSE_RENT = "houseRent"
    DEPOSIT = "deposit"


class ExpenseStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Expense(MongoModel):
    description: str
    amount: float = Field(..., gt=0)
    category: ExpenseCategory = ExpenseCategory.OTHERS
    paid_by: str  # member id, member handle or the admin actor
    date: str
    status: ExpenseStatus = ExpenseStatus.PENDING
    splits: List[str] = []
