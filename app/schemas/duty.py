from typing import Optional
from pydantic import BaseModel, ConfigDict

from app.schemas.common import DocumentId, IsoDate


class DutyAssign(BaseModel):
    member_id: str
    date: IsoDate
    assigned_by: Optional[str] = None


class DutyResponse(BaseModel):
    id: DocumentId
    member_id: str
    member_name: str
    date: str

    model_config = ConfigDict(populate_by_name=True)
