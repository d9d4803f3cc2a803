import base64
import logging
from datetime import datetime, timezone
from typing import List

from fastapi import HTTPException, status
from pymongo import ReturnDocument

from app.core.auth import CurrentUser
from app.db.session import get_database, to_object_id
from app.models.report import MonthlyReport
from app.services.duty_service import DutyService
from app.services.pdf_service import render_monthly_report
from app.services.summary_service import SummaryService

logger = logging.getLogger(__name__)


class ReportService:
    """Stored monthly PDF reports, one per month."""

    @staticmethod
    async def list_all() -> List[dict]:
        """Report metadata, newest month first. The PDF payload is left out."""
        db = await get_database()
        return await db.monthly_reports.find({}, {"pdf_data": 0}).sort("month", -1).to_list(None)

    @staticmethod
    async def get(report_id: str) -> MonthlyReport:
        db = await get_database()
        doc = await db.monthly_reports.find_one({"_id": to_object_id(report_id)})
        if not doc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
        return MonthlyReport(**doc)

    @staticmethod
    async def by_month(month: str) -> MonthlyReport:
        db = await get_database()
        doc = await db.monthly_reports.find_one({"month": month})
        if not doc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
        return MonthlyReport(**doc)

    @staticmethod
    async def generate(month: str, current_user: CurrentUser) -> MonthlyReport:
        """Render the month's reconciliation and store it, replacing any earlier report."""
        db = await get_database()
        reconciliation = await SummaryService.billing(month)
        managers = await DutyService.managers_for_month(month)
        pdf = render_monthly_report(reconciliation, managers)

        now = datetime.now(timezone.utc)
        fields = {
            "pdf_data": base64.b64encode(pdf).decode("ascii"),
            "file_name": f"mess-report-{month}.pdf",
            "generated_by": current_user.id,
            "generated_by_name": current_user.name,
            "file_size": len(pdf),
            "updated_at": now,
        }
        doc = await db.monthly_reports.find_one_and_update(
            {"month": month},
            {"$set": fields, "$setOnInsert": {"month": month, "created_at": now}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        logger.info("Generated report for %s (%d bytes)", month, len(pdf))
        return MonthlyReport(**doc)

    @staticmethod
    async def delete(report_id: str) -> None:
        db = await get_database()
        result = await db.monthly_reports.delete_one({"_id": to_object_id(report_id)})
        if result.deleted_count == 0:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
        logger.info("Deleted report %s", report_id)
