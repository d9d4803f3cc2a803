import logging
from datetime import datetime, timezone
from typing import List

from fastapi import HTTPException, status
from pymongo.errors import DuplicateKeyError

from app.core.config import settings
from app.db.session import get_database
from app.models.setting import Setting
from app.schemas.setting import SettingCreate, SettingUpdate

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTIONS = {
    "clear_notifications_password": "Password required to clear all notification history",
    "clear_guests_password": "Password required to clear all guest meals",
    "clear_all_meals_password": "Password required to clear all meals",
    "clear_expenses_password": "Password required to clear all admin expense history",
}


class SettingsService:
    @staticmethod
    async def seed_defaults() -> int:
        """Insert missing default feature passwords. Returns how many were created."""
        db = await get_database()
        created = 0
        for key, value in settings.DEFAULT_FEATURE_PASSWORDS.items():
            if await db.settings.find_one({"key": key}):
                continue
            setting = Setting(key=key, value=value, description=DEFAULT_DESCRIPTIONS.get(key))
            await db.settings.insert_one(setting.to_document())
            created += 1
        if created:
            logger.info("Seeded %d default settings", created)
        return created

    @staticmethod
    async def list_all() -> List[Setting]:
        db = await get_database()
        docs = await db.settings.find().to_list(None)
        return [Setting(**doc) for doc in docs]

    @staticmethod
    async def get(key: str) -> Setting:
        db = await get_database()
        doc = await db.settings.find_one({"key": key})
        if not doc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Setting not found")
        return Setting(**doc)

    @staticmethod
    async def verify(key: str, password: str) -> bool:
        setting = await SettingsService.get(key)
        return setting.value == password

    @staticmethod
    async def require_password(key: str, password: str) -> None:
        """Guard for protected bulk deletions: 401 unless `password` matches."""
        db = await get_database()
        doc = await db.settings.find_one({"key": key})
        if not doc or doc.get("value") != password:
            logger.warning("Rejected password for protected action %s", key)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")

    @staticmethod
    async def update(key: str, update: SettingUpdate) -> Setting:
        db = await get_database()
        existing = await SettingsService.get(key)

        if update.current_password is not None and existing.value != update.current_password:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Current password is incorrect"
            )

        now = datetime.now(timezone.utc)
        await db.settings.update_one(
            {"key": key},
            {"$set": {"value": update.value, "updated_at": now}}
        )
        logger.info("Setting %s updated", key)
        existing.value = update.value
        existing.updated_at = now
        return existing

    @staticmethod
    async def create(setting_in: SettingCreate) -> Setting:
        db = await get_database()
        setting = Setting(**setting_in.model_dump())
        try:
            await db.settings.insert_one(setting.to_document())
        except DuplicateKeyError:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Setting already exists")
        logger.info("Setting %s created", setting.key)
        return setting
