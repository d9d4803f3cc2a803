from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.auth import CurrentUser, get_current_user, require_admin
from app.schemas.common import DeletedCountResponse, MessageResponse, ModifiedCountResponse, PasswordConfirm
from app.schemas.notification import (
    NotificationCreate,
    NotificationResponse,
    NotificationUpdate,
    PaymentBulkRequest,
    PaymentBulkResponse,
)
from app.services.notification_service import NotificationService
from app.services.summary_service import SummaryService

router = APIRouter()


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(current_user: CurrentUser = Depends(get_current_user)):
    """Admin sees every notification, members their own plus broadcasts"""
    return await NotificationService.list_for(current_user)


@router.get("/{user_id}", response_model=List[NotificationResponse])
async def list_user_notifications(user_id: str, current_user: CurrentUser = Depends(get_current_user)):
    return await NotificationService.list_for_user(user_id, current_user)


@router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
async def create_notification(
    notification_in: NotificationCreate,
    current_user: CurrentUser = Depends(get_current_user)
):
    return await NotificationService.create(notification_in)


@router.post("/payment/bulk", response_model=PaymentBulkResponse, status_code=status.HTTP_201_CREATED)
async def send_payment_notifications(
    request: PaymentBulkRequest,
    current_user: CurrentUser = Depends(require_admin)
):
    """Send payment dues. Without explicit members, the month's balances are billed."""
    if request.members is not None:
        dues = request.members
    elif request.month:
        dues = await SummaryService.payment_dues(request.month)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide members or a month"
        )

    notifications = await NotificationService.send_payment_dues(dues)
    return PaymentBulkResponse(
        count=len(notifications),
        notifications=[n.to_document() for n in notifications],
    )


@router.put("/mark-read/{user_id}", response_model=ModifiedCountResponse)
async def mark_all_read(user_id: str, current_user: CurrentUser = Depends(get_current_user)):
    modified = await NotificationService.mark_all_read(user_id, current_user)
    return ModifiedCountResponse(message="Notifications marked as read", modified_count=modified)


@router.put("/payment/{notification_id}/mark-paid", response_model=NotificationResponse)
async def mark_paid(notification_id: str, current_user: CurrentUser = Depends(get_current_user)):
    return await NotificationService.mark_paid(notification_id)


@router.put("/{notification_id}", response_model=NotificationResponse)
async def update_notification(
    notification_id: str,
    update: NotificationUpdate,
    current_user: CurrentUser = Depends(get_current_user)
):
    return await NotificationService.update(notification_id, update)


@router.delete("/admin/clear-all", response_model=DeletedCountResponse)
async def clear_all_notifications(
    confirm: PasswordConfirm,
    current_user: CurrentUser = Depends(require_admin)
):
    deleted = await NotificationService.clear_all(confirm.password)
    return DeletedCountResponse(message=f"Deleted {deleted} notifications", deleted_count=deleted)


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(notification_id: str, current_user: CurrentUser = Depends(get_current_user)):
    await NotificationService.delete(notification_id)
    return MessageResponse(message="Notification deleted successfully")
