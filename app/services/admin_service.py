import logging
from typing import Dict

from app.db.session import get_database
from app.schemas.admin import ClearMonthPreview, ClearMonthResult, CollectionStat
from app.services.auth_service import AuthService
from app.utils.validation import month_regex

logger = logging.getLogger(__name__)

# Collections keyed by an ISO `date` field that a month clear removes
MONTHLY_COLLECTIONS = (
    "meals",
    "guest_meals",
    "expenses",
    "market_requests",
    "cooking_records",
    "manager_records",
)


class AdminService:
    @staticmethod
    async def clear_month_preview(month: str) -> ClearMonthPreview:
        db = await get_database()
        query = {"date": {"$regex": month_regex(month)}}
        stats = [
            CollectionStat(name=name, count=await db[name].count_documents(query))
            for name in MONTHLY_COLLECTIONS
        ]
        return ClearMonthPreview(month=month, stats=stats, total_items=sum(s.count for s in stats))

    @staticmethod
    async def clear_month(month: str, password: str) -> ClearMonthResult:
        """Delete every dated record of the month. Requires the admin password."""
        await AuthService.verify_admin_password(password)
        db = await get_database()
        query = {"date": {"$regex": month_regex(month)}}

        deleted: Dict[str, int] = {}
        for name in MONTHLY_COLLECTIONS:
            result = await db[name].delete_many(query)
            deleted[name] = result.deleted_count

        total = sum(deleted.values())
        logger.warning("Cleared %d records for %s: %s", total, month, deleted)
        return ClearMonthResult(
            message=f"Cleared {total} records for {month}",
            deleted_counts=deleted,
            total_deleted=total,
        )
