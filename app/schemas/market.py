from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict

from app.models.market import MarketRequestType
from app.schemas.common import DocumentId, IsoDate


class MarketClaim(BaseModel):
    date: IsoDate
    assigned_member_id: str
    request_type: MarketRequestType = MarketRequestType.REQUEST


class MarketDecision(BaseModel):
    status: Literal["approved", "rejected"]


class MarketRequestResponse(BaseModel):
    id: DocumentId
    date: str
    assigned_member_id: str
    status: str
    request_type: str

    model_config = ConfigDict(populate_by_name=True)


class CalendarCell(BaseModel):
    date: str
    status: Optional[str] = None
    assigned_member_id: Optional[str] = None


class MarketCalendarResponse(BaseModel):
    month: str
    weeks: List[List[Optional[CalendarCell]]]
