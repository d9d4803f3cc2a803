from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from app.models.summary import PaymentStatus
from app.schemas.expense import ExpenseResponse
from app.schemas.meal import GuestMealResponse, MealResponse


class PaymentUpdate(BaseModel):
    member_id: str
    member_name: str = ""
    deposit_balance: float = 0.0
    submitted_amount: float = Field(0.0, ge=0)
    received_amount: Optional[float] = Field(None, ge=0)
    deposit_date: str = ""
    note: str = ""
    # Explicit override; derived from received vs balance when omitted
    payment_status: Optional[PaymentStatus] = None


class PaymentRow(BaseModel):
    month: str
    member_id: str
    member_name: str = ""
    payment_status: str = PaymentStatus.PENDING.value
    deposit_balance: float = 0.0
    submitted_amount: float = 0.0
    received_amount: float = 0.0
    deposit_date: str = ""
    note: str = ""


class MemberMonthSummary(BaseModel):
    member_id: str
    user_id: str
    member_name: str
    expenses: Dict[str, float]
    regular_meals: int
    guest_meals: int
    payment_status: str
    submitted_amount: float
    received_amount: float
    deposit_balance: float
    deposit_date: str
    note: str
    deposit: float


class MonthSummaryResponse(BaseModel):
    month: str
    managers: List[str]
    members: List[MemberMonthSummary]


class AdminExpensesResponse(BaseModel):
    month: str
    total_members: int
    managers: List[str]
    admin_expenses: List[ExpenseResponse]


class InvoiceMember(BaseModel):
    id: str
    name: str
    user_id: str


class InvoiceResponse(BaseModel):
    month: str
    member: InvoiceMember
    total_members: int
    managers: List[str]
    member_expenses: List[ExpenseResponse]
    regular_meals: List[MealResponse]
    guest_meals: List[GuestMealResponse]
    payment: Optional[PaymentRow] = None
