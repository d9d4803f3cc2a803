from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.models.expense import ExpenseCategory, ExpenseStatus
from app.schemas.common import DocumentId, IsoDate


class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=300)
    amount: float = Field(..., gt=0)
    category: ExpenseCategory = ExpenseCategory.OTHERS
    paid_by: str = Field(..., min_length=1)
    date: IsoDate
    status: Optional[ExpenseStatus] = None
    splits: List[str] = []


class ExpenseUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=300)
    amount: Optional[float] = Field(None, gt=0)
    category: Optional[ExpenseCategory] = None
    paid_by: Optional[str] = None
    date: Optional[IsoDate] = None
    status: Optional[ExpenseStatus] = None


class ExpenseResponse(BaseModel):
    id: DocumentId
    description: str
    amount: float
    category: str
    paid_by: str
    date: str
    status: str
    splits: List[str] = []

    model_config = ConfigDict(populate_by_name=True)
