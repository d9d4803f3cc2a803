import logging
from typing import Dict, List

from fastapi import HTTPException, status
from pymongo.errors import DuplicateKeyError

from app.core.config import settings
from app.db.session import get_database, to_object_id
from app.models.duty import DutyRecord
from app.schemas.duty import DutyAssign
from app.services.member_service import MemberService
from app.services.notification_service import NotificationService
from app.utils.validation import month_regex

logger = logging.getLogger(__name__)

COOKING = "cooking_records"
MANAGER = "manager_records"

ROSTER_LABELS = {COOKING: "cooking duty", MANAGER: "manager duty"}


class DutyService:
    """Cooking and manager rosters share one shape, keyed by collection."""

    @staticmethod
    async def list_all(roster: str) -> List[DutyRecord]:
        db = await get_database()
        docs = await db[roster].find().sort("date", -1).to_list(None)
        return [DutyRecord(**doc) for doc in docs]

    @staticmethod
    async def list_for_date(roster: str, date: str) -> List[DutyRecord]:
        db = await get_database()
        docs = await db[roster].find({"date": date}).to_list(None)
        return [DutyRecord(**doc) for doc in docs]

    @staticmethod
    async def managers_for_month(month: str) -> List[str]:
        """Unique manager names of the month, in order of first duty."""
        db = await get_database()
        docs = await db[MANAGER].find({"date": {"$regex": month_regex(month)}}).sort("date", 1).to_list(None)
        names: Dict[str, str] = {}
        for doc in docs:
            names.setdefault(doc["member_id"], doc["member_name"])
        return list(names.values())

    @staticmethod
    async def assign(roster: str, assign_in: DutyAssign) -> DutyRecord:
        db = await get_database()
        member = await MemberService.get(assign_in.member_id)
        record = DutyRecord(member_id=str(member.id), member_name=member.name, date=assign_in.date)

        try:
            await db[roster].insert_one(record.to_document())
        except DuplicateKeyError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Record already exists for this member and date"
            )
        logger.info("%s: %s assigned on %s", roster, record.member_id, record.date)

        assigned_by = assign_in.assigned_by
        if assigned_by and assigned_by not in member.identifiers():
            by_name = "Admin"
            if assigned_by != settings.ADMIN_ACTOR:
                assigner = await MemberService.find(assigned_by)
                by_name = assigner.name if assigner else "Admin"
            await NotificationService.send(
                user_id=record.member_id,
                message=f"You have been assigned {ROSTER_LABELS[roster]} for {record.date} by {by_name}",
                type=f"{roster.split('_')[0]}_assignment",
            )
        return record

    @staticmethod
    async def delete(roster: str, record_id: str) -> None:
        db = await get_database()
        result = await db[roster].delete_one({"_id": to_object_id(record_id)})
        if result.deleted_count == 0:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")
        logger.info("%s: record %s removed", roster, record_id)
