from typing import Dict, List
from pydantic import BaseModel

from app.schemas.common import Month


class CollectionStat(BaseModel):
    name: str
    count: int


class ClearMonthPreview(BaseModel):
    month: str
    stats: List[CollectionStat]
    total_items: int


class ClearMonthRequest(BaseModel):
    month: Month
    password: str


class ClearMonthResult(BaseModel):
    success: bool = True
    message: str
    deleted_counts: Dict[str, int]
    total_deleted: int
