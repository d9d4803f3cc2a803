from typing import List

from fastapi import APIRouter, Depends, status

from app.core.auth import CurrentUser, get_current_user, require_admin
from app.schemas.common import MessageResponse
from app.schemas.member import (
    MemberCreate,
    MemberPasswordReset,
    MemberResponse,
    MemberSummaryResponse,
    MemberUpdate,
)
from app.services.member_service import MemberService

router = APIRouter()


@router.get("", response_model=List[MemberResponse])
async def list_members(current_user: CurrentUser = Depends(get_current_user)):
    return await MemberService.list_all()


@router.get("/summary", response_model=List[MemberSummaryResponse])
async def members_summary(current_user: CurrentUser = Depends(get_current_user)):
    """Total recorded meals and deposit per member"""
    return await MemberService.summary()


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(member_id: str, current_user: CurrentUser = Depends(get_current_user)):
    return await MemberService.get(member_id)


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def create_member(
    member_in: MemberCreate,
    current_user: CurrentUser = Depends(require_admin)
):
    return await MemberService.create(member_in)


@router.put("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: str,
    member_in: MemberUpdate,
    current_user: CurrentUser = Depends(require_admin)
):
    return await MemberService.update(member_id, member_in)


@router.patch("/{member_id}/password", response_model=MessageResponse)
async def reset_member_password(
    member_id: str,
    reset: MemberPasswordReset,
    current_user: CurrentUser = Depends(require_admin)
):
    await MemberService.reset_password(member_id, reset.new_password)
    return MessageResponse(message="Password updated successfully")


@router.delete("/{member_id}", response_model=MessageResponse)
async def delete_member(member_id: str, current_user: CurrentUser = Depends(require_admin)):
    await MemberService.delete(member_id)
    return MessageResponse(message="Member deleted successfully")
