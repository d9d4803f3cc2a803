from enum import Enum
from app.models.base import MongoModel


class MarketStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MarketRequestType(str, Enum):
    REQUEST = "request"
    MANUAL_ASSIGN = "manual_assign"


class MarketRequest(MongoModel):
    date: str
    assigned_member_id: str
    status: MarketStatus = MarketStatus.PENDING
    request_type: MarketRequestType = MarketRequestType.REQUEST
