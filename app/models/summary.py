from enum import Enum
from app.models.base import MongoModel


class PaymentStatus(str, Enum):
    CLEAR = "clear"
    PARTIAL = "partial"
    PENDING = "pending"


class MonthlySummary(MongoModel):
    """Per-member payment row for one month. Unique on (month, member_id)."""
    month: str
    member_id: str
    member_name: str = ""
    payment_status: PaymentStatus = PaymentStatus.PENDING
    deposit_balance: float = 0.0
    submitted_amount: float = 0.0
    received_amount: float = 0.0
    deposit_date: str = ""
    note: str = ""
