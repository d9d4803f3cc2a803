import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException, status
from pymongo import ReturnDocument

from app.core.auth import CurrentUser
from app.core.config import settings
from app.db.session import get_database, to_object_id
from app.models.expense import Expense, ExpenseStatus
from app.schemas.expense import ExpenseCreate, ExpenseUpdate
from app.services.settings_service import SettingsService
from app.utils.validation import month_regex

logger = logging.getLogger(__name__)


class ExpenseService:
    @staticmethod
    async def list_all(month: Optional[str] = None, status_filter: Optional[str] = None) -> List[Expense]:
        db = await get_database()
        query = {}
        if month:
            query["date"] = {"$regex": month_regex(month)}
        if status_filter:
            query["status"] = status_filter
        docs = await db.expenses.find(query).sort("date", 1).to_list(None)
        return [Expense(**doc) for doc in docs]

    @staticmethod
    async def create(expense_in: ExpenseCreate, current_user: CurrentUser) -> Expense:
        """
        Record an expense.

        Admin entries are approved unless a status is given. Member entries
        always start pending and can never be attributed to the admin.
        """
        db = await get_database()

        paid_by = expense_in.paid_by
        if current_user.is_admin:
            expense_status = expense_in.status or ExpenseStatus.APPROVED
        else:
            expense_status = ExpenseStatus.PENDING
            if paid_by == settings.ADMIN_ACTOR:
                paid_by = current_user.id

        expense = Expense(
            description=expense_in.description,
            amount=expense_in.amount,
            category=expense_in.category,
            paid_by=paid_by,
            date=expense_in.date,
            status=expense_status,
            splits=expense_in.splits,
        )
        await db.expenses.insert_one(expense.to_document())
        logger.info(
            "Expense %s recorded: %s %.2f by %s (%s)",
            expense.id, expense.category, expense.amount, expense.paid_by, expense.status
        )
        return expense

    @staticmethod
    async def update(expense_id: str, expense_in: ExpenseUpdate) -> Expense:
        db = await get_database()
        update_data = expense_in.model_dump(exclude_unset=True, exclude_none=True, mode="json")
        update_data["updated_at"] = datetime.now(timezone.utc)

        doc = await db.expenses.find_one_and_update(
            {"_id": to_object_id(expense_id)},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER
        )
        if not doc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
        logger.info("Expense %s updated: %s", expense_id, sorted(update_data))
        return Expense(**doc)

    @staticmethod
    async def delete(expense_id: str) -> None:
        db = await get_database()
        result = await db.expenses.delete_one({"_id": to_object_id(expense_id)})
        if result.deleted_count == 0:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
        logger.info("Expense %s deleted", expense_id)

    @staticmethod
    async def approve_all() -> int:
        db = await get_database()
        result = await db.expenses.update_many(
            {"status": ExpenseStatus.PENDING.value},
            {"$set": {"status": ExpenseStatus.APPROVED.value, "updated_at": datetime.now(timezone.utc)}}
        )
        logger.info("Approved %d pending expenses", result.modified_count)
        return result.modified_count

    @staticmethod
    async def clear_admin_expenses(password: str) -> int:
        await SettingsService.require_password("clear_expenses_password", password)
        db = await get_database()
        result = await db.expenses.delete_many({"paid_by": settings.ADMIN_ACTOR})
        logger.info("Cleared %d admin expenses", result.deleted_count)
        return result.deleted_count

    @staticmethod
    async def clear_history() -> int:
        db = await get_database()
        result = await db.expenses.delete_many({})
        logger.info("Cleared all %d expenses", result.deleted_count)
        return result.deleted_count
