from fastapi import APIRouter, Depends, Response

from app.core.auth import CurrentUser, require_admin
from app.schemas.common import MonthPath
from app.schemas.summary import (
    AdminExpensesResponse,
    InvoiceResponse,
    MonthSummaryResponse,
    PaymentRow,
    PaymentUpdate,
)
from app.services.billing import MonthlyReconciliation
from app.services.pdf_service import render_member_invoice
from app.services.summary_service import SummaryService

router = APIRouter()


@router.get("/{month}", response_model=MonthSummaryResponse)
async def month_summary(month: MonthPath, current_user: CurrentUser = Depends(require_admin)):
    """Per-member category totals, meal counts and payment rows"""
    return await SummaryService.month_summary(month)


@router.get("/{month}/billing", response_model=MonthlyReconciliation)
async def month_billing(month: MonthPath, current_user: CurrentUser = Depends(require_admin)):
    """Monthly reconciliation: per-head share, meal charge and member balances"""
    return await SummaryService.billing(month)


@router.put("/{month}/payment", response_model=PaymentRow)
async def update_payment(
    month: MonthPath,
    update: PaymentUpdate,
    current_user: CurrentUser = Depends(require_admin)
):
    return await SummaryService.upsert_payment(month, update)


@router.get("/{month}/admin-expenses", response_model=AdminExpensesResponse)
async def admin_expenses(month: MonthPath, current_user: CurrentUser = Depends(require_admin)):
    return await SummaryService.admin_expenses(month)


@router.get("/{month}/invoice/{member_id}", response_model=InvoiceResponse)
async def member_invoice(month: MonthPath, member_id: str, current_user: CurrentUser = Depends(require_admin)):
    return await SummaryService.invoice(month, member_id)


@router.get("/{month}/invoice/{member_id}/pdf")
async def member_invoice_pdf(month: MonthPath, member_id: str, current_user: CurrentUser = Depends(require_admin)):
    invoice = await SummaryService.invoice(month, member_id)
    pdf = render_member_invoice(invoice)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="invoice-{invoice.member.user_id}-{month}.pdf"'},
    )
