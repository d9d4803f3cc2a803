import logging
from datetime import datetime, timezone
from typing import Dict, List, Tuple

from fastapi import HTTPException, status
from pymongo import ReturnDocument

from app.core.config import settings
from app.db.session import get_database
from app.models.expense import Expense, ExpenseCategory, ExpenseStatus
from app.models.meal import GuestMeal, Meal
from app.models.member import Member
from app.models.summary import MonthlySummary, PaymentStatus
from app.schemas.notification import PaymentDue
from app.schemas.summary import (
    AdminExpensesResponse,
    InvoiceMember,
    InvoiceResponse,
    MemberMonthSummary,
    MonthSummaryResponse,
    PaymentRow,
    PaymentUpdate,
)
from app.services import billing
from app.services.duty_service import DutyService
from app.services.member_service import MemberService
from app.utils.validation import month_regex

logger = logging.getLogger(__name__)

Snapshot = Tuple[List[Member], List[Expense], List[Meal], List[GuestMeal]]


def _payment_row(summary: MonthlySummary) -> PaymentRow:
    return PaymentRow(**summary.model_dump(include=set(PaymentRow.model_fields)))


class SummaryService:
    @staticmethod
    async def load_snapshot(month: str) -> Snapshot:
        """Members plus the month's non-rejected expenses, meals and guest meals."""
        db = await get_database()
        date_filter = {"$regex": month_regex(month)}

        members = await MemberService.list_all()
        expense_docs = await db.expenses.find(
            {"date": date_filter, "status": {"$ne": ExpenseStatus.REJECTED.value}}
        ).sort("date", 1).to_list(None)
        meal_docs = await db.meals.find({"date": date_filter}).sort("date", 1).to_list(None)
        guest_docs = await db.guest_meals.find({"date": date_filter}).sort("date", 1).to_list(None)

        return (
            members,
            [Expense(**doc) for doc in expense_docs],
            [Meal(**doc) for doc in meal_docs],
            [GuestMeal(**doc) for doc in guest_docs],
        )

    @staticmethod
    async def billing(month: str) -> billing.MonthlyReconciliation:
        members, expenses, meals, guest_meals = await SummaryService.load_snapshot(month)
        return billing.reconcile(month, members, expenses, meals, guest_meals)

    @staticmethod
    async def payment_dues(month: str) -> List[PaymentDue]:
        result = await SummaryService.billing(month)
        return [
            PaymentDue(user_id=row.member_id, member_name=row.name, amount=row.balance)
            for row in result.members
        ]

    @staticmethod
    async def payment_rows(month: str, members: List[Member]) -> Dict[str, MonthlySummary]:
        """Saved payment rows keyed by member id; missing rows start pending at 0."""
        db = await get_database()
        docs = await db.monthly_summaries.find({"month": month}).to_list(None)
        rows = {doc["member_id"]: MonthlySummary(**doc) for doc in docs}

        missing = [
            MonthlySummary(month=month, member_id=str(m.id), member_name=m.name)
            for m in members
            if not (m.identifiers() & rows.keys())
        ]
        if missing:
            await db.monthly_summaries.insert_many([row.to_document() for row in missing])
            logger.info("Initialised %d payment rows for %s", len(missing), month)
            rows.update({row.member_id: row for row in missing})
        return rows

    @staticmethod
    async def month_summary(month: str) -> MonthSummaryResponse:
        members, expenses, meals, guest_meals = await SummaryService.load_snapshot(month)
        payments = await SummaryService.payment_rows(month, members)

        rows = []
        for member in members:
            ids = member.identifiers()
            own = [e for e in expenses if e.paid_by in ids or e.paid_by == member.name]
            payment = payments.get(str(member.id)) or payments.get(member.user_id)
            rows.append(MemberMonthSummary(
                member_id=str(member.id),
                user_id=member.user_id,
                member_name=member.name,
                expenses={c.value: billing.category_total(own, c) for c in ExpenseCategory},
                regular_meals=sum(1 for m in meals if m.member_id in ids),
                guest_meals=sum(1 for g in guest_meals if g.member_id in ids),
                payment_status=payment.payment_status,
                submitted_amount=payment.submitted_amount,
                received_amount=payment.received_amount,
                deposit_balance=payment.deposit_balance,
                deposit_date=payment.deposit_date,
                note=payment.note,
                deposit=member.deposit,
            ))

        return MonthSummaryResponse(
            month=month,
            managers=await DutyService.managers_for_month(month),
            members=rows,
        )

    @staticmethod
    async def upsert_payment(month: str, update: PaymentUpdate) -> PaymentRow:
        """
        Save a member's payment row for the month.

        received_amount defaults to the approved deposit entries of the month.
        payment_status is derived from received vs balance unless overridden.
        """
        db = await get_database()
        member = await MemberService.get(update.member_id)

        received = update.received_amount
        if received is None:
            _, expenses, _, _ = await SummaryService.load_snapshot(month)
            received = billing.received_amount(expenses, member, month)

        derived = update.payment_status or billing.payment_status(received, update.deposit_balance)

        fields = {
            "month": month,
            "member_id": str(member.id),
            "member_name": update.member_name or member.name,
            "payment_status": PaymentStatus(derived).value,
            "deposit_balance": update.deposit_balance,
            "submitted_amount": update.submitted_amount,
            "received_amount": received,
            "deposit_date": update.deposit_date,
            "note": update.note,
            "updated_at": datetime.now(timezone.utc),
        }
        doc = await db.monthly_summaries.find_one_and_update(
            {"month": month, "member_id": str(member.id)},
            {"$set": fields, "$setOnInsert": {"created_at": fields["updated_at"]}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        logger.info("Payment row %s/%s saved: %s", month, member.id, fields["payment_status"])
        return _payment_row(MonthlySummary(**doc))

    @staticmethod
    async def admin_expenses(month: str) -> AdminExpensesResponse:
        db = await get_database()
        docs = await db.expenses.find({
            "date": {"$regex": month_regex(month)},
            "paid_by": settings.ADMIN_ACTOR,
            "status": {"$ne": ExpenseStatus.REJECTED.value},
        }).sort("date", 1).to_list(None)

        return AdminExpensesResponse(
            month=month,
            total_members=await MemberService.count(),
            managers=await DutyService.managers_for_month(month),
            admin_expenses=[Expense(**doc).model_dump(by_alias=True) for doc in docs],
        )

    @staticmethod
    async def invoice(month: str, member_id: str) -> InvoiceResponse:
        """Everything needed to render one member's invoice."""
        db = await get_database()
        member = await MemberService.find(member_id)
        if member is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")

        ids = list(member.identifiers())
        date_filter = {"$regex": month_regex(month)}

        expense_docs = await db.expenses.find({
            "date": date_filter,
            "status": {"$ne": ExpenseStatus.REJECTED.value},
            "paid_by": {"$in": ids + [member.name]},
        }).sort("date", 1).to_list(None)
        meal_docs = await db.meals.find(
            {"date": date_filter, "member_id": {"$in": ids}}
        ).sort("date", 1).to_list(None)
        guest_docs = await db.guest_meals.find(
            {"date": date_filter, "member_id": {"$in": ids}}
        ).sort("date", 1).to_list(None)
        payment_doc = await db.monthly_summaries.find_one(
            {"month": month, "member_id": {"$in": ids}}
        )

        return InvoiceResponse(
            month=month,
            member=InvoiceMember(id=str(member.id), name=member.name, user_id=member.user_id),
            total_members=await MemberService.count(),
            managers=await DutyService.managers_for_month(month),
            member_expenses=[Expense(**doc).model_dump(by_alias=True) for doc in expense_docs],
            regular_meals=[Meal(**doc).model_dump(by_alias=True) for doc in meal_docs],
            guest_meals=[GuestMeal(**doc).model_dump(by_alias=True) for doc in guest_docs],
            payment=_payment_row(MonthlySummary(**payment_doc)) if payment_doc else None,
        )
