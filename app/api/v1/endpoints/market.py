from typing import List, Union

from fastapi import APIRouter, Depends, status

from app.core.auth import CurrentUser, get_current_user
from app.schemas.common import DatePath, MessageResponse, MonthPath, MonthQuery
from app.schemas.market import MarketCalendarResponse, MarketClaim, MarketDecision, MarketRequestResponse
from app.services.market_service import MarketService

router = APIRouter()


@router.get("", response_model=List[MarketRequestResponse])
async def list_market_requests(
    month: MonthQuery = None,
    current_user: CurrentUser = Depends(get_current_user)
):
    return await MarketService.list_all(month)


@router.get("/calendar/{month}", response_model=MarketCalendarResponse)
async def market_calendar(month: MonthPath, current_user: CurrentUser = Depends(get_current_user)):
    """Sunday-first weeks of the month with the duty on each day"""
    return MarketCalendarResponse(month=month, weeks=await MarketService.calendar(month))


@router.post("", response_model=MarketRequestResponse, status_code=status.HTTP_201_CREATED)
async def claim_market_day(claim_in: MarketClaim, current_user: CurrentUser = Depends(get_current_user)):
    """Members request a day for themselves, the admin assigns directly"""
    return await MarketService.claim(claim_in, current_user)


@router.put("/{date}", response_model=Union[MarketRequestResponse, MessageResponse])
async def decide_market_request(
    date: DatePath,
    decision: MarketDecision,
    current_user: CurrentUser = Depends(get_current_user)
):
    """Approve or reject a claim. A rejected claim is removed."""
    request = await MarketService.decide(date, decision.status, current_user)
    if request is None:
        return MessageResponse(message="Market request rejected")
    return request
