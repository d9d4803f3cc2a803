import logging
from typing import Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import BaseModel

from app.core.security import decode_access_token
from app.db.session import get_database

logger = logging.getLogger(__name__)

security = HTTPBearer()


class CurrentUser(BaseModel):
    """Identity carried by the bearer token."""
    id: str
    name: str
    role: str  # "admin" | "member"
    user_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def owns(self, member_id: str) -> bool:
        """True when `member_id` refers to this user by id or login handle."""
        return member_id in {self.id, self.user_id}


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> CurrentUser:
    """Get current user from JWT token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(credentials.credentials)
        subject: str = payload.get("sub")
        role: str = payload.get("role")
        if subject is None or role not in ("admin", "member"):
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    if not ObjectId.is_valid(subject):
        raise credentials_exception

    db = await get_database()
    collection = db.admins if role == "admin" else db.members
    doc = await collection.find_one({"_id": ObjectId(subject)})
    if doc is None:
        raise credentials_exception

    if role == "admin":
        return CurrentUser(id=subject, name="Mess Admin", role="admin")
    return CurrentUser(
        id=subject,
        name=doc["name"],
        role="member",
        user_id=doc.get("user_id"),
    )


async def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Reject non-admin callers with 403."""
    if not current_user.is_admin:
        logger.warning("Admin route refused for member %s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin only."
        )
    return current_user
