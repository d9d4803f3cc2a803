"""
Market duty scheduling.

A member claims an empty day (pending) and the admin approves or rejects it.
The admin can also assign a day directly (approved). One claim per date:
the first write wins and later claims get 409. Members are capped at
MARKET_REQUEST_LIMIT pending+approved claims per month.
"""
import calendar
import logging
from datetime import datetime, timezone
from typing import Collection, Iterable, List, Optional, Union

from fastapi import HTTPException, status
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.auth import CurrentUser
from app.core.config import settings
from app.db.session import get_database
from app.models.market import MarketRequest, MarketRequestType, MarketStatus
from app.schemas.market import CalendarCell, MarketClaim
from app.services.member_service import MemberService
from app.services.notification_service import ADMIN_INBOX, NotificationService
from app.utils.validation import in_month, is_past_month, month_regex, validate_month

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = (MarketStatus.PENDING, MarketStatus.APPROVED)


def active_request_count(
    requests: Iterable[MarketRequest],
    member_id: Union[str, Collection[str]],
    month: str,
) -> int:
    """`member_id` may be a single id or every identifier of one member."""
    ids = {member_id} if isinstance(member_id, str) else set(member_id)
    return sum(
        1 for r in requests
        if r.assigned_member_id in ids
        and r.status in ACTIVE_STATUSES
        and in_month(r.date, month)
    )


def can_request(
    requests: Iterable[MarketRequest],
    member_id: Union[str, Collection[str]],
    month: str,
    limit: Optional[int] = None,
) -> bool:
    """True while the member holds fewer than `limit` active claims in `month`."""
    if limit is None:
        limit = settings.MARKET_REQUEST_LIMIT
    return active_request_count(requests, member_id, month) < limit


def month_calendar(month: str, requests: Iterable[MarketRequest]) -> List[List[Optional[CalendarCell]]]:
    """Sunday-first weeks of the month; padding days are None."""
    year, mon = (int(part) for part in validate_month(month).split("-"))
    by_date = {r.date: r for r in requests if in_month(r.date, month)}

    weeks = []
    for week in calendar.Calendar(firstweekday=calendar.SUNDAY).monthdayscalendar(year, mon):
        row: List[Optional[CalendarCell]] = []
        for day in week:
            if day == 0:
                row.append(None)
                continue
            iso = f"{month}-{day:02d}"
            claim = by_date.get(iso)
            row.append(CalendarCell(
                date=iso,
                status=claim.status if claim else None,
                assigned_member_id=claim.assigned_member_id if claim else None,
            ))
        weeks.append(row)
    return weeks


class MarketService:
    @staticmethod
    async def list_all(month: Optional[str] = None) -> List[MarketRequest]:
        db = await get_database()
        query = {"date": {"$regex": month_regex(month)}} if month else {}
        docs = await db.market_requests.find(query).sort("date", 1).to_list(None)
        return [MarketRequest(**doc) for doc in docs]

    @staticmethod
    async def calendar(month: str) -> List[List[Optional[CalendarCell]]]:
        requests = await MarketService.list_all(month)
        return month_calendar(month, requests)

    @staticmethod
    async def claim(claim_in: MarketClaim, current_user: CurrentUser) -> MarketRequest:
        """Create a request (member) or a direct assignment (admin)."""
        db = await get_database()
        month = claim_in.date[:7]

        if not current_user.is_admin:
            if not current_user.owns(claim_in.assigned_member_id):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Access denied. You can only create requests for yourself."
                )
            if claim_in.request_type != MarketRequestType.REQUEST:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Only managers can assign market duty."
                )
            if is_past_month(month):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Past months are read-only."
                )

        member = await MemberService.get(claim_in.assigned_member_id)
        if not current_user.is_admin:
            existing = await MarketService.list_all(month)
            if not can_request(existing, member.identifiers(), month):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"You can only request {settings.MARKET_REQUEST_LIMIT} days per month"
                )

        is_request = claim_in.request_type == MarketRequestType.REQUEST
        request = MarketRequest(
            date=claim_in.date,
            assigned_member_id=str(member.id),
            request_type=claim_in.request_type,
            status=MarketStatus.PENDING if is_request else MarketStatus.APPROVED,
        )
        try:
            await db.market_requests.insert_one(request.to_document())
        except DuplicateKeyError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"{claim_in.date} is already claimed"
            )
        logger.info(
            "Market %s for %s by %s (%s)",
            request.request_type, request.date, request.assigned_member_id, request.status
        )

        if is_request:
            await NotificationService.send(
                user_id=ADMIN_INBOX,
                message=f"New Market Request for {request.date}",
                type="market_request",
                metadata={"date": request.date, "requester_id": request.assigned_member_id},
            )
        return request

    @staticmethod
    async def decide(date: str, decision: str, current_user: CurrentUser) -> Optional[MarketRequest]:
        """
        Approve (admin only) or reject a claim.

        Rejection deletes the claim. A requester may reject (cancel) their own
        claim while it is still pending. Returns the approved request, or None
        after a rejection.
        """
        db = await get_database()
        doc = await db.market_requests.find_one({"date": date})
        if not doc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Request not found")
        existing = MarketRequest(**doc)

        is_requester = current_user.owns(existing.assigned_member_id)
        is_pending = existing.status == MarketStatus.PENDING

        if not current_user.is_admin and is_past_month(date[:7]):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Past months are read-only."
            )

        if decision == MarketStatus.APPROVED:
            if not current_user.is_admin:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Access denied. Only managers can approve requests."
                )
            updated = await db.market_requests.find_one_and_update(
                {"date": date},
                {"$set": {"status": MarketStatus.APPROVED.value, "updated_at": datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER
            )
            await NotificationService.delete_where({"type": "market_request", "metadata.date": date})
            await NotificationService.send(
                user_id=existing.assigned_member_id,
                message=f"Your market request for {date} is APPROVED.",
                type="market_approved",
                metadata={"date": date},
            )
            logger.info("Market request %s approved", date)
            return MarketRequest(**updated)

        if decision == MarketStatus.REJECTED:
            if not current_user.is_admin and not (is_requester and is_pending):
                raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied.")

            await db.market_requests.delete_one({"date": date})
            await NotificationService.delete_where({"type": "market_request", "metadata.date": date})
            if current_user.is_admin and not is_requester:
                await NotificationService.send(
                    user_id=existing.assigned_member_id,
                    message=f"Your market request for {date} was REJECTED. Please choose another date.",
                    type="market_rejected",
                    metadata={"date": date},
                )
            logger.info("Market request %s %s", date, "cancelled" if is_requester else "rejected")
            return None

        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid status update")
