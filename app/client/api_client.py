"""
Async client for the Mess Manager API.

Wraps httpx.AsyncClient with the bearer token and decodes the collections
used for local reconciliation into the server's own models.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.models.expense import Expense
from app.models.market import MarketRequest
from app.models.meal import GuestMeal, Meal
from app.models.member import Member
from app.models.notification import Notification

logger = logging.getLogger(__name__)


class MessApiError(Exception):
    """Raised for any non-2xx response."""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


def _params(**values) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


class MessApiClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.token = token
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "MessApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = await self._http.request(method, f"/api{path}", headers=headers, **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get("detail", response.text) if isinstance(body, dict) else response.text
            logger.debug("%s %s failed with %s", method, path, response.status_code)
            raise MessApiError(response.status_code, detail)

        if response.headers.get("content-type", "").startswith("application/pdf"):
            return response.content
        return response.json()

    # Auth

    async def login(self, user_id: str, password: str, role: str = "member") -> Dict[str, Any]:
        """Log in and keep the token for later calls."""
        data = await self._request(
            "POST", "/auth/login", json={"user_id": user_id, "password": password, "role": role}
        )
        self.token = data["access_token"]
        return data["user"]

    async def verify(self) -> Dict[str, Any]:
        return await self._request("GET", "/auth/verify")

    async def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        return await self._request(
            "PATCH",
            "/auth/change-password",
            json={"current_password": current_password, "new_password": new_password},
        )

    # Members

    async def members(self) -> List[Member]:
        return [Member(**doc) for doc in await self._request("GET", "/members")]

    async def member_summary(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/members/summary")

    async def create_member(self, **member) -> Member:
        return Member(**await self._request("POST", "/members", json=member))

    async def update_member(self, member_id: str, **changes) -> Member:
        return Member(**await self._request("PUT", f"/members/{member_id}", json=changes))

    async def delete_member(self, member_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/members/{member_id}")

    # Expenses

    async def expenses(self, month: Optional[str] = None, status: Optional[str] = None) -> List[Expense]:
        docs = await self._request("GET", "/expenses", params=_params(month=month, status=status))
        return [Expense(**doc) for doc in docs]

    async def create_expense(self, **expense) -> Expense:
        return Expense(**await self._request("POST", "/expenses", json=expense))

    async def update_expense(self, expense_id: str, **changes) -> Expense:
        return Expense(**await self._request("PUT", f"/expenses/{expense_id}", json=changes))

    async def delete_expense(self, expense_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/expenses/{expense_id}")

    async def approve_all_expenses(self) -> Dict[str, Any]:
        return await self._request("PUT", "/expenses/approve-all")

    # Meals

    async def meals(self, date: Optional[str] = None, month: Optional[str] = None) -> List[Meal]:
        docs = await self._request("GET", "/meals", params=_params(date=date, month=month))
        return [Meal(**doc) for doc in docs]

    async def add_meal(self, date: str, member_id: str, meal_type: str) -> Meal:
        doc = await self._request(
            "POST", "/meals", json={"date": date, "member_id": member_id, "meal_type": meal_type}
        )
        return Meal(**doc)

    async def remove_meal(self, date: str, member_id: str, meal_type: str) -> Dict[str, Any]:
        return await self._request(
            "DELETE", "/meals", json={"date": date, "member_id": member_id, "meal_type": meal_type}
        )

    async def guest_meals(self, date: Optional[str] = None, month: Optional[str] = None) -> List[GuestMeal]:
        docs = await self._request("GET", "/guest-meals", params=_params(date=date, month=month))
        return [GuestMeal(**doc) for doc in docs]

    async def add_guest_meal(self, **guest_meal) -> GuestMeal:
        return GuestMeal(**await self._request("POST", "/guest-meals", json=guest_meal))

    async def remove_guest_meal(self, guest_meal_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/guest-meals/{guest_meal_id}")

    # Market duty

    async def market(self, month: Optional[str] = None) -> List[MarketRequest]:
        docs = await self._request("GET", "/market", params=_params(month=month))
        return [MarketRequest(**doc) for doc in docs]

    async def market_calendar(self, month: str) -> Dict[str, Any]:
        return await self._request("GET", f"/market/calendar/{month}")

    async def claim_market_day(
        self, date: str, assigned_member_id: str, request_type: str = "request"
    ) -> MarketRequest:
        doc = await self._request("POST", "/market", json={
            "date": date,
            "assigned_member_id": assigned_member_id,
            "request_type": request_type,
        })
        return MarketRequest(**doc)

    async def decide_market(self, date: str, status: str) -> Dict[str, Any]:
        return await self._request("PUT", f"/market/{date}", json={"status": status})

    # Notifications

    async def notifications(self) -> List[Notification]:
        return [Notification(**doc) for doc in await self._request("GET", "/notifications")]

    async def send_notification(self, user_id: str, message: str, **extra) -> Notification:
        doc = await self._request("POST", "/notifications", json={"user_id": user_id, "message": message, **extra})
        return Notification(**doc)

    async def send_payment_dues(
        self, month: Optional[str] = None, members: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        return await self._request(
            "POST", "/notifications/payment/bulk", json=_params(month=month, members=members)
        )

    async def mark_read(self, user_id: str) -> Dict[str, Any]:
        return await self._request("PUT", f"/notifications/mark-read/{user_id}")

    # Summary and reports

    async def month_summary(self, month: str) -> Dict[str, Any]:
        return await self._request("GET", f"/summary/{month}")

    async def billing(self, month: str) -> Dict[str, Any]:
        return await self._request("GET", f"/summary/{month}/billing")

    async def update_payment(self, month: str, **payment) -> Dict[str, Any]:
        return await self._request("PUT", f"/summary/{month}/payment", json=payment)

    async def invoice_pdf(self, month: str, member_id: str) -> bytes:
        return await self._request("GET", f"/summary/{month}/invoice/{member_id}/pdf")

    async def reports(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/reports")

    async def generate_report(self, month: str) -> Dict[str, Any]:
        return await self._request("POST", "/reports", json={"month": month})

    async def verify_setting(self, key: str, password: str) -> bool:
        data = await self._request("POST", "/settings/verify", json={"key": key, "password": password})
        return data["valid"]
