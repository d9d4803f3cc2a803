from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import DocumentId, Month


class NotificationCreate(BaseModel):
    user_id: str
    message: str = Field(..., min_length=1, max_length=1000)
    type: Optional[str] = None
    metadata: Dict[str, Any] = {}


class NotificationUpdate(BaseModel):
    is_read: Optional[bool] = None
    status: Optional[str] = None
    is_paid: Optional[bool] = None


class PaymentDue(BaseModel):
    user_id: str
    member_name: str = ""
    amount: float


class PaymentBulkRequest(BaseModel):
    """Explicit dues, or omit `members` to bill the computed balances of `month`."""
    month: Optional[Month] = None
    members: Optional[List[PaymentDue]] = None


class NotificationResponse(BaseModel):
    id: DocumentId
    user_id: str
    message: str
    date: str
    is_read: bool = False
    type: Optional[str] = None
    metadata: Dict[str, Any] = {}
    status: Optional[str] = None
    payment_amount: Optional[float] = None
    is_paid: bool = False

    model_config = ConfigDict(populate_by_name=True)


class PaymentBulkResponse(BaseModel):
    success: bool = True
    count: int
    notifications: List[NotificationResponse]
