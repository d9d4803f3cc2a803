from typing import List

from fastapi import APIRouter, Depends, status

from app.core.auth import CurrentUser, get_current_user, require_admin
from app.schemas.common import MessageResponse, MonthPath
from app.schemas.report import ReportCreate, ReportResponse, ReportSummary
from app.services.report_service import ReportService

router = APIRouter()


@router.get("", response_model=List[ReportSummary])
async def list_reports(current_user: CurrentUser = Depends(get_current_user)):
    return await ReportService.list_all()


@router.get("/month/{month}", response_model=ReportResponse)
async def get_report_by_month(month: MonthPath, current_user: CurrentUser = Depends(get_current_user)):
    return await ReportService.by_month(month)


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(report_id: str, current_user: CurrentUser = Depends(get_current_user)):
    return await ReportService.get(report_id)


@router.post("", response_model=ReportSummary, status_code=status.HTTP_201_CREATED)
async def generate_report(report_in: ReportCreate, current_user: CurrentUser = Depends(require_admin)):
    """Render the month's billing report and store it, replacing an older one"""
    return await ReportService.generate(report_in.month, current_user)


@router.delete("/{report_id}", response_model=MessageResponse)
async def delete_report(report_id: str, current_user: CurrentUser = Depends(require_admin)):
    await ReportService.delete(report_id)
    return MessageResponse(message="Report deleted successfully")
