from enum import Enum
from typing import Optional
from app.models.base import MongoModel


class SettingCategory(str, Enum):
    SECURITY = "security"
    FEATURE = "feature"
    SYSTEM = "system"


class Setting(MongoModel):
    key: str
    value: str
    category: SettingCategory = SettingCategory.FEATURE
    description: Optional[str] = None
