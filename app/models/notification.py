from datetime import date
from typing import Any, Dict, Optional
from pydantic import Field
from app.models.base import MongoModel


def _today() -> str:
    return date.today().isoformat()


class Notification(MongoModel):
    user_id: str  # member id, "admin" or "all"
    message: str
    date: str = Field(default_factory=_today)
    is_read: bool = False
    type: Optional[str] = None
    metadata: Dict[str, Any] = {}
    status: Optional[str] = None
    payment_amount: Optional[float] = None
    is_paid: bool = False
