from fastapi import APIRouter, Depends

from app.core.auth import CurrentUser, get_current_user
from app.schemas.auth import AuthUser, LoginRequest, PasswordChange, TokenResponse
from app.schemas.common import MessageResponse
from app.services.auth_service import AuthService

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(credentials: LoginRequest):
    """Login as the admin (username) or a member (user_id)"""
    return await AuthService.login(credentials)


@router.get("/verify", response_model=AuthUser)
async def verify(current_user: CurrentUser = Depends(get_current_user)):
    """Return the identity behind the bearer token"""
    return AuthUser(**current_user.model_dump())


@router.patch("/change-password", response_model=MessageResponse)
async def change_password(
    password_data: PasswordChange,
    current_user: CurrentUser = Depends(get_current_user)
):
    """Change the calling member's password"""
    await AuthService.change_member_password(current_user, password_data)
    return MessageResponse(message="Password changed successfully")
