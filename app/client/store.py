"""
Client-side snapshot of the mess.

Slices are fetched concurrently. A slice that fails keeps its previous
value, so one bad endpoint never blanks the rest of the state.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from app.client.api_client import MessApiClient
from app.models.expense import Expense
from app.models.market import MarketRequest
from app.models.meal import GuestMeal, Meal
from app.models.member import Member
from app.models.notification import Notification
from app.services import billing

logger = logging.getLogger(__name__)

SLICES = ("members", "expenses", "meals", "guest_meals", "market", "notifications")

# Slices each client mutation can change
INVALIDATES: Dict[str, Tuple[str, ...]] = {
    "create_member": ("members",),
    "update_member": ("members",),
    "delete_member": ("members", "meals", "guest_meals"),
    "create_expense": ("expenses",),
    "update_expense": ("expenses",),
    "delete_expense": ("expenses",),
    "approve_all_expenses": ("expenses",),
    "add_meal": ("meals",),
    "remove_meal": ("meals",),
    "add_guest_meal": ("guest_meals",),
    "remove_guest_meal": ("guest_meals",),
    "claim_market_day": ("market", "notifications"),
    "decide_market": ("market", "notifications"),
    "send_notification": ("notifications",),
    "send_payment_dues": ("notifications",),
    "mark_read": ("notifications",),
}


class MessState(BaseModel):
    members: List[Member] = []
    expenses: List[Expense] = []
    meals: List[Meal] = []
    guest_meals: List[GuestMeal] = []
    market: List[MarketRequest] = []
    notifications: List[Notification] = []


class MessStore:
    def __init__(self, client: MessApiClient, month: Optional[str] = None):
        self.client = client
        self.month = month
        self.state = MessState()

    async def _fetch(self, name: str) -> List[Any]:
        if name == "members":
            return await self.client.members()
        if name == "expenses":
            return await self.client.expenses(month=self.month)
        if name == "meals":
            return await self.client.meals(month=self.month)
        if name == "guest_meals":
            return await self.client.guest_meals(month=self.month)
        if name == "market":
            return await self.client.market(month=self.month)
        return await self.client.notifications()

    async def refresh(self, *slices: str) -> List[str]:
        """Re-fetch the named slices concurrently. Returns the ones that failed."""
        names = slices or SLICES
        unknown = set(names) - set(SLICES)
        if unknown:
            raise ValueError(f"Unknown slices: {sorted(unknown)}")

        results = await asyncio.gather(*(self._fetch(name) for name in names), return_exceptions=True)

        failed = []
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                logger.warning("Refreshing %s failed, keeping previous data: %s", name, result)
                failed.append(name)
                continue
            setattr(self.state, name, result)
        return failed

    async def refresh_all(self) -> List[str]:
        return await self.refresh(*SLICES)

    async def mutate(self, action: str, *args, **kwargs) -> Any:
        """Run a client mutation, then re-fetch only the slices it touches."""
        if action not in INVALIDATES:
            raise ValueError(f"Unknown mutation: {action}")
        result = await getattr(self.client, action)(*args, **kwargs)
        await self.refresh(*INVALIDATES[action])
        return result

    def reconcile(self, month: Optional[str] = None) -> billing.MonthlyReconciliation:
        """Monthly reconciliation over the current snapshot."""
        month = month or self.month
        if month is None:
            raise ValueError("A month is required")
        return billing.reconcile(
            month,
            self.state.members,
            self.state.expenses,
            self.state.meals,
            self.state.guest_meals,
        )
