import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status

from app.core.auth import CurrentUser
from app.core.config import settings
from app.core.security import create_access_token, hash_password, verify_password
from app.db.session import get_database, to_object_id
from app.models.member import Admin
from app.schemas.auth import (
    AdminPasswordChange,
    AuthUser,
    LoginRequest,
    PasswordChange,
    TokenResponse,
)

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    async def ensure_admin() -> bool:
        """Seed the single admin account from settings when none exists."""
        db = await get_database()
        if await db.admins.find_one({}):
            return False
        admin = Admin(
            username=settings.ADMIN_USERNAME,
            password_hash=hash_password(settings.ADMIN_PASSWORD),
        )
        await db.admins.insert_one(admin.to_document())
        logger.info("Seeded admin account '%s'", admin.username)
        return True

    @staticmethod
    async def login(credentials: LoginRequest) -> TokenResponse:
        """Login as the admin or as a member"""
        db = await get_database()

        if credentials.role == "admin":
            admin_doc = await db.admins.find_one({})
            if (
                not admin_doc
                or admin_doc["username"].lower() != credentials.user_id.lower()
                or not verify_password(credentials.password, admin_doc.get("password_hash", ""))
            ):
                logger.warning("Failed admin login for '%s'", credentials.user_id)
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid credentials"
                )
            user = AuthUser(id=str(admin_doc["_id"]), name="Mess Admin", role="admin")
        else:
            member_doc = await db.members.find_one({"user_id": credentials.user_id})
            if not member_doc or not verify_password(
                credentials.password, member_doc.get("password_hash", "")
            ):
                logger.warning("Failed member login for '%s'", credentials.user_id)
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Incorrect user ID or password"
                )
            user = AuthUser(
                id=str(member_doc["_id"]),
                name=member_doc["name"],
                role="member",
                user_id=member_doc["user_id"],
            )

        access_token = create_access_token(
            data={"sub": user.id, "role": user.role, "name": user.name, "user_id": user.user_id}
        )
        return TokenResponse(access_token=access_token, user=user)

    @staticmethod
    async def change_member_password(current_user: CurrentUser, password_data: PasswordChange) -> None:
        db = await get_database()
        oid = to_object_id(current_user.id)

        member_doc = await db.members.find_one({"_id": oid})
        if not member_doc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        if not verify_password(password_data.current_password, member_doc.get("password_hash", "")):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Current password is incorrect"
            )

        await db.members.update_one(
            {"_id": oid},
            {"$set": {
                "password_hash": hash_password(password_data.new_password.strip()),
                "updated_at": datetime.now(timezone.utc)
            }}
        )
        logger.info("Member %s changed their password", current_user.id)

    @staticmethod
    async def admin_username() -> str:
        db = await get_database()
        admin_doc = await db.admins.find_one({})
        if not admin_doc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found")
        return admin_doc["username"]

    @staticmethod
    async def verify_admin_password(password: str) -> None:
        db = await get_database()
        admin_doc = await db.admins.find_one({})
        if not admin_doc or not verify_password(password, admin_doc.get("password_hash", "")):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid admin password"
            )

    @staticmethod
    async def change_admin_password(change: AdminPasswordChange) -> str:
        """Update admin credentials. Returns the (possibly new) username."""
        db = await get_database()
        admin_doc = await db.admins.find_one({})
        if not admin_doc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found")

        if not verify_password(change.current_password, admin_doc.get("password_hash", "")):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Current password is incorrect"
            )

        username = change.new_username or admin_doc["username"]
        await db.admins.update_one(
            {"_id": admin_doc["_id"]},
            {"$set": {
                "username": username,
                "password_hash": hash_password(change.new_password),
                "updated_at": datetime.now(timezone.utc)
            }}
        )
        logger.info("Admin credentials updated")
        return username
