from typing import List

from fastapi import APIRouter, Depends, status

from app.core.auth import CurrentUser, get_current_user, require_admin
from app.schemas.setting import SettingCreate, SettingResponse, SettingUpdate, SettingVerify, VerifyResponse
from app.services.settings_service import SettingsService

router = APIRouter()


@router.get("", response_model=List[SettingResponse])
async def list_settings(current_user: CurrentUser = Depends(require_admin)):
    return await SettingsService.list_all()


@router.post("/verify", response_model=VerifyResponse)
async def verify_setting(verify_in: SettingVerify, current_user: CurrentUser = Depends(get_current_user)):
    """Check a feature password without revealing it"""
    return VerifyResponse(valid=await SettingsService.verify(verify_in.key, verify_in.password))


@router.get("/{key}", response_model=SettingResponse)
async def get_setting(key: str, current_user: CurrentUser = Depends(require_admin)):
    return await SettingsService.get(key)


@router.put("/{key}", response_model=SettingResponse)
async def update_setting(
    key: str,
    update: SettingUpdate,
    current_user: CurrentUser = Depends(require_admin)
):
    return await SettingsService.update(key, update)


@router.post("", response_model=SettingResponse, status_code=status.HTTP_201_CREATED)
async def create_setting(setting_in: SettingCreate, current_user: CurrentUser = Depends(require_admin)):
    return await SettingsService.create(setting_in)
