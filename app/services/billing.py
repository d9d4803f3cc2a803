"""
Billing reconciliation - monthly per-member obligations.

Pure functions over snapshot lists already loaded from the database or the API.

Algorithm:
1. Sum approved shared bills (gas, paper, wifi, didi, spices, houseRent,
   electric, others) and split them equally per head
2. Floor every member's meal count at the monthly minimum
3. Meal charge = (market + rice - guest meal revenue) / adjusted meal total
4. Per member: total = effective meals * charge + per head + own guest meals
5. Balance = total - (deposit + own approved market spend)

Positive balance = member owes the mess, negative = mess owes the member.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from app.core.config import settings
from app.models.expense import Expense, ExpenseCategory, ExpenseStatus
from app.models.meal import GuestMeal, Meal
from app.models.member import Member
from app.models.summary import PaymentStatus
from app.utils.validation import BillingError, in_month, validate_month

SHARED_BILL_CATEGORIES = (
    ExpenseCategory.GAS,
    ExpenseCategory.PAPER,
    ExpenseCategory.WIFI,
    ExpenseCategory.DIDI,
    ExpenseCategory.SPICES,
    ExpenseCategory.HOUSE_RENT,
    ExpenseCategory.ELECTRIC,
    ExpenseCategory.OTHERS,
)


class PerHeadResult(BaseModel):
    bills: Dict[str, float]
    member_count: int
    total_amount: float
    per_head_amount: float


class MealChargeResult(BaseModel):
    total_market: float
    rice: float
    guest_adjustment: float
    total_meals: int
    meal_charge: float


class MemberBill(BaseModel):
    member_id: str
    user_id: str
    name: str
    meals: int
    effective_meals: int
    is_below_minimum: bool
    meal_charge: float
    meal_cost: float
    fixed_cost: float
    guest_meals: int
    guest_cost: float
    market_contribution: float
    deposit: float
    total: float
    balance: float


class BillingTotals(BaseModel):
    total_meal_cost: float = 0.0
    total_deposit: float = 0.0
    total_balance: float = 0.0


class MonthlyReconciliation(BaseModel):
    month: str
    min_meals: int
    per_head: PerHeadResult
    meal_charge: MealChargeResult
    members: List[MemberBill]
    totals: BillingTotals


def _non_negative(name: str, value: float) -> float:
    if value < 0:
        raise BillingError(f"{name} cannot be negative: {value}")
    return value


def compute_per_head(bills: Mapping[str, float], member_count: int) -> PerHeadResult:
    """Split shared bills equally. A member count of 0 is treated as 1."""
    if member_count < 0:
        raise BillingError(f"Member count cannot be negative: {member_count}")
    for name, amount in bills.items():
        _non_negative(name, amount)

    total = float(sum(bills.values()))
    return PerHeadResult(
        bills={str(k): float(v) for k, v in bills.items()},
        member_count=member_count,
        total_amount=total,
        per_head_amount=total / (member_count or 1),
    )


def effective_meals(actual: int, minimum: Optional[int] = None) -> int:
    """Minimum billing: a member pays for at least `minimum` meals."""
    if minimum is None:
        minimum = settings.MIN_MEALS_PER_MONTH
    _non_negative("Minimum meals", minimum)
    return max(minimum, actual)


def total_adjusted_meals(meal_counts: Iterable[int], minimum: Optional[int] = None) -> int:
    return sum(effective_meals(count, minimum) for count in meal_counts)


def compute_meal_charge(
    total_market: float,
    rice: float,
    guest_adjustment: float,
    total_meals: int,
) -> MealChargeResult:
    """Per-meal rate. Guest revenue offsets food spend; zero meals count as 1."""
    _non_negative("Market total", total_market)
    _non_negative("Rice total", rice)
    _non_negative("Guest adjustment", guest_adjustment)

    denominator = total_meals if total_meals > 0 else 1
    return MealChargeResult(
        total_market=total_market,
        rice=rice,
        guest_adjustment=guest_adjustment,
        total_meals=denominator,
        meal_charge=(total_market + rice - guest_adjustment) / denominator,
    )


def guest_meal_cost(
    guest_meals: Iterable[GuestMeal],
    prices: Optional[Mapping[str, float]] = None,
) -> float:
    """Sum of guest meal prices; unknown types cost nothing."""
    if prices is None:
        prices = settings.GUEST_MEAL_PRICES
    return float(sum(prices.get(str(g.guest_meal_type), 0) for g in guest_meals))


def category_total(expenses: Iterable[Expense], category: str) -> float:
    return float(sum(e.amount for e in expenses if e.category == category))


def approved_only(expenses: Iterable[Expense]) -> List[Expense]:
    return [e for e in expenses if e.status == ExpenseStatus.APPROVED]


def shared_bills(expenses: Iterable[Expense]) -> Dict[str, float]:
    """Approved totals for every shared category, zero-filled."""
    approved = approved_only(expenses)
    return {c.value: category_total(approved, c) for c in SHARED_BILL_CATEGORIES}


def payment_status(received: float, balance: float) -> PaymentStatus:
    """
    Derive payment status from totals.

    clear: received >= balance > 0
    partial: 0 < received < balance
    pending: anything else
    """
    if balance > 0 and received >= balance:
        return PaymentStatus.CLEAR
    if 0 < received < balance:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PENDING


def received_amount(expenses: Iterable[Expense], member: Member, month: str) -> float:
    """Admin-confirmed deposits recorded for the member in `month`."""
    ids = member.identifiers()
    return float(sum(
        e.amount for e in approved_only(expenses)
        if e.category == ExpenseCategory.DEPOSIT
        and e.paid_by in ids
        and in_month(e.date, month)
    ))


def compose_member_bill(
    member: Member,
    meal_count: int,
    hosted_guest_meals: Sequence[GuestMeal],
    market_contribution: float,
    charge: MealChargeResult,
    per_head: PerHeadResult,
    *,
    min_meals: int,
    guest_prices: Mapping[str, float],
) -> MemberBill:
    effective = effective_meals(meal_count, min_meals)
    meal_cost = effective * charge.meal_charge
    fixed_cost = per_head.per_head_amount
    guest_cost = guest_meal_cost(hosted_guest_meals, guest_prices)
    total = meal_cost + fixed_cost + guest_cost
    balance = total - (member.deposit + market_contribution)

    return MemberBill(
        member_id=str(member.id),
        user_id=member.user_id,
        name=member.name,
        meals=meal_count,
        effective_meals=effective,
        is_below_minimum=meal_count < min_meals,
        meal_charge=charge.meal_charge,
        meal_cost=meal_cost,
        fixed_cost=fixed_cost,
        guest_meals=len(hosted_guest_meals),
        guest_cost=guest_cost,
        market_contribution=market_contribution,
        deposit=member.deposit,
        total=total,
        balance=balance,
    )


def reconcile(
    month: str,
    members: Sequence[Member],
    expenses: Iterable[Expense],
    meals: Iterable[Meal],
    guest_meals: Iterable[GuestMeal],
    *,
    min_meals: Optional[int] = None,
    guest_prices: Optional[Mapping[str, float]] = None,
) -> MonthlyReconciliation:
    """Run the full monthly reconciliation over snapshot collections."""
    validate_month(month)
    if min_meals is None:
        min_meals = settings.MIN_MEALS_PER_MONTH
    if guest_prices is None:
        guest_prices = settings.GUEST_MEAL_PRICES

    month_expenses = approved_only(e for e in expenses if in_month(e.date, month))
    month_meals = [m for m in meals if in_month(m.date, month)]
    month_guests = [g for g in guest_meals if in_month(g.date, month)]

    per_head = compute_per_head(shared_bills(month_expenses), len(members))

    meal_counts: Dict[str, int] = {}
    hosted: Dict[str, List[GuestMeal]] = {}
    for member in members:
        ids = member.identifiers()
        meal_counts[str(member.id)] = sum(1 for m in month_meals if m.member_id in ids)
        hosted[str(member.id)] = [g for g in month_guests if g.member_id in ids]

    charge = compute_meal_charge(
        category_total(month_expenses, ExpenseCategory.MARKET),
        category_total(month_expenses, ExpenseCategory.RICE),
        guest_meal_cost(month_guests, guest_prices),
        total_adjusted_meals(meal_counts.values(), min_meals),
    )

    rows: List[MemberBill] = []
    totals = BillingTotals()
    for member in members:
        ids = member.identifiers()
        market = float(sum(
            e.amount for e in month_expenses
            if e.category == ExpenseCategory.MARKET and e.paid_by in ids
        ))
        row = compose_member_bill(
            member,
            meal_counts[str(member.id)],
            hosted[str(member.id)],
            market,
            charge,
            per_head,
            min_meals=min_meals,
            guest_prices=guest_prices,
        )
        totals.total_meal_cost += row.meal_cost
        totals.total_deposit += row.deposit
        totals.total_balance += row.balance
        rows.append(row)

    return MonthlyReconciliation(
        month=month,
        min_meals=min_meals,
        per_head=per_head,
        meal_charge=charge,
        members=rows,
        totals=totals,
    )
