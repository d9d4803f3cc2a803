"""Member management schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.common import DocumentId, IsoDate


class MemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    user_id: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=4, max_length=100)
    email: Optional[EmailStr] = None
    mobile: Optional[str] = Field(None, max_length=20)
    deposit: float = 0.0
    date_of_birth: Optional[IsoDate] = None


class MemberUpdate(BaseModel):
    """Whitelisted fields; role and login handle cannot be changed."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    mobile: Optional[str] = Field(None, max_length=20)
    deposit: Optional[float] = None
    date_of_birth: Optional[IsoDate] = None


class MemberPasswordReset(BaseModel):
    new_password: str = Field(..., min_length=4, max_length=100)


class MemberResponse(BaseModel):
    id: DocumentId
    user_id: str
    name: str
    email: Optional[str] = None
    mobile: Optional[str] = None
    role: str = "member"
    deposit: float = 0.0
    date_of_birth: Optional[str] = None
    joined_at: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)


class MemberSummaryResponse(BaseModel):
    id: str
    user_id: str
    name: str
    total_meals: int
    deposit: float
