from typing import Literal, Optional
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Schema for login. `user_id` is the admin username for role=admin."""
    user_id: str = Field(..., min_length=1)
    password: str
    role: Literal["admin", "member"] = "member"


class AuthUser(BaseModel):
    id: str
    name: str
    role: str
    user_id: Optional[str] = None


class TokenResponse(BaseModel):
    """Schema for authentication token response"""
    access_token: str
    token_type: str = "bearer"
    user: AuthUser


class PasswordChange(BaseModel):
    """Schema for a member changing their own password"""
    current_password: str
    new_password: str = Field(..., min_length=4, max_length=100)


class AdminPasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6, max_length=100)
    new_username: Optional[str] = Field(None, min_length=1, max_length=100)


class AdminCredentials(BaseModel):
    username: str
