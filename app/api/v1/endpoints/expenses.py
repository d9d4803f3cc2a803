from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.auth import CurrentUser, get_current_user, require_admin
from app.models.expense import ExpenseStatus
from app.schemas.common import DeletedCountResponse, MessageResponse, ModifiedCountResponse, MonthQuery, PasswordConfirm
from app.schemas.expense import ExpenseCreate, ExpenseResponse, ExpenseUpdate
from app.services.expense_service import ExpenseService

router = APIRouter()


@router.get("", response_model=List[ExpenseResponse])
async def list_expenses(
    month: MonthQuery = None,
    status_filter: Optional[ExpenseStatus] = Query(None, alias="status"),
    current_user: CurrentUser = Depends(get_current_user)
):
    return await ExpenseService.list_all(month, status_filter.value if status_filter else None)


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    current_user: CurrentUser = Depends(get_current_user)
):
    """Admin entries are approved immediately, member entries wait for approval"""
    return await ExpenseService.create(expense_in, current_user)


@router.put("/approve-all", response_model=ModifiedCountResponse)
async def approve_all(current_user: CurrentUser = Depends(require_admin)):
    modified = await ExpenseService.approve_all()
    return ModifiedCountResponse(message=f"Approved {modified} expenses", modified_count=modified)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: str,
    expense_in: ExpenseUpdate,
    current_user: CurrentUser = Depends(require_admin)
):
    return await ExpenseService.update(expense_id, expense_in)


@router.delete("/admin/clear-all", response_model=DeletedCountResponse)
async def clear_admin_expenses(
    confirm: PasswordConfirm,
    current_user: CurrentUser = Depends(require_admin)
):
    deleted = await ExpenseService.clear_admin_expenses(confirm.password)
    return DeletedCountResponse(message=f"Deleted {deleted} admin expenses", deleted_count=deleted)


@router.delete("/clear-all-history", response_model=DeletedCountResponse)
async def clear_history(current_user: CurrentUser = Depends(require_admin)):
    deleted = await ExpenseService.clear_history()
    return DeletedCountResponse(message=f"Deleted {deleted} expenses", deleted_count=deleted)


@router.delete("/{expense_id}", response_model=MessageResponse)
async def delete_expense(expense_id: str, current_user: CurrentUser = Depends(require_admin)):
    await ExpenseService.delete(expense_id)
    return MessageResponse(message="Expense deleted successfully")
