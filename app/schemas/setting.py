from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from app.models.setting import SettingCategory


class SettingCreate(BaseModel):
    key: str = Field(..., min_length=1, max_length=100)
    value: str = Field(..., min_length=1)
    category: SettingCategory = SettingCategory.FEATURE
    description: Optional[str] = None


class SettingUpdate(BaseModel):
    value: str = Field(..., min_length=1)
    current_password: Optional[str] = None


class SettingVerify(BaseModel):
    key: str
    password: str


class SettingResponse(BaseModel):
    key: str
    value: str
    category: str
    description: Optional[str] = None
    updated_at: Optional[datetime] = None


class VerifyResponse(BaseModel):
    valid: bool
