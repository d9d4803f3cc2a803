import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from fastapi import HTTPException, status
from pymongo import ReturnDocument

from app.core.auth import CurrentUser
from app.core.config import settings
from app.db.session import get_database, to_object_id
from app.models.notification import Notification
from app.schemas.notification import NotificationCreate, NotificationUpdate, PaymentDue
from app.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

BROADCAST = "all"
ADMIN_INBOX = settings.ADMIN_ACTOR


def payment_message(amount: float) -> str:
    rounded = round(amount)
    direction = "to pay" if amount >= 0 else "to receive"
    return f"Payment Due: ₹{abs(rounded)} {direction} for this month's mess expenses."


class NotificationService:
    @staticmethod
    async def send(
        user_id: str,
        message: str,
        type: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **extra: Any,
    ) -> Notification:
        db = await get_database()
        notification = Notification(
            user_id=user_id,
            message=message,
            type=type,
            metadata=metadata or {},
            **extra,
        )
        await db.notifications.insert_one(notification.to_document())
        logger.info("Notification %s (%s) sent to %s", notification.id, type, user_id)
        return notification

    @staticmethod
    async def create(notification_in: NotificationCreate) -> Notification:
        return await NotificationService.send(**notification_in.model_dump())

    @staticmethod
    async def list_for(current_user: CurrentUser) -> List[Notification]:
        """Admin sees everything; members see their own and broadcasts."""
        db = await get_database()
        query: Dict[str, Any] = {}
        if not current_user.is_admin:
            ids = [i for i in (current_user.id, current_user.user_id) if i]
            query = {"user_id": {"$in": ids + [BROADCAST]}}
        docs = await db.notifications.find(query).sort("created_at", -1).to_list(None)
        return [Notification(**doc) for doc in docs]

    @staticmethod
    async def list_for_user(user_id: str, current_user: CurrentUser) -> List[Notification]:
        if not current_user.is_admin and not current_user.owns(user_id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        db = await get_database()
        docs = await db.notifications.find(
            {"user_id": {"$in": [user_id, BROADCAST]}}
        ).sort("created_at", -1).to_list(None)
        return [Notification(**doc) for doc in docs]

    @staticmethod
    async def send_payment_dues(dues: Iterable[PaymentDue]) -> List[Notification]:
        sent_date = datetime.now(timezone.utc).isoformat()
        notifications = []
        for due in dues:
            notifications.append(await NotificationService.send(
                user_id=due.user_id,
                message=payment_message(due.amount),
                type="payment",
                metadata={"member_name": due.member_name, "sent_date": sent_date},
                payment_amount=round(due.amount),
                is_paid=False,
            ))
        return notifications

    @staticmethod
    async def mark_all_read(user_id: str, current_user: CurrentUser) -> int:
        if not current_user.is_admin and not current_user.owns(user_id):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        db = await get_database()
        result = await db.notifications.update_many(
            {"user_id": {"$in": [user_id, BROADCAST]}},
            {"$set": {"is_read": True}}
        )
        return result.modified_count

    @staticmethod
    async def update(notification_id: str, update: NotificationUpdate) -> Notification:
        db = await get_database()
        update_data = update.model_dump(exclude_none=True)
        update_data["updated_at"] = datetime.now(timezone.utc)
        doc = await db.notifications.find_one_and_update(
            {"_id": to_object_id(notification_id)},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER
        )
        if not doc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
        return Notification(**doc)

    @staticmethod
    async def mark_paid(notification_id: str) -> Notification:
        return await NotificationService.update(
            notification_id, NotificationUpdate(is_paid=True, is_read=True)
        )

    @staticmethod
    async def delete(notification_id: str) -> None:
        db = await get_database()
        result = await db.notifications.delete_one({"_id": to_object_id(notification_id)})
        if result.deleted_count == 0:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")

    @staticmethod
    async def delete_where(query: Dict[str, Any]) -> int:
        db = await get_database()
        result = await db.notifications.delete_many(query)
        return result.deleted_count

    @staticmethod
    async def clear_all(password: str) -> int:
        await SettingsService.require_password("clear_notifications_password", password)
        deleted = await NotificationService.delete_where({})
        logger.info("Cleared %d notifications", deleted)
        return deleted
