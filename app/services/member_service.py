import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from bson import ObjectId
from fastapi import HTTPException, status
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.security import hash_password
from app.db.session import get_database, to_object_id
from app.models.member import Member
from app.schemas.member import MemberCreate, MemberSummaryResponse, MemberUpdate

logger = logging.getLogger(__name__)


def member_lookup(member_id: str) -> dict:
    """Query matching a member by document id or login handle."""
    clauses = [{"user_id": member_id}]
    if ObjectId.is_valid(member_id):
        clauses.insert(0, {"_id": ObjectId(member_id)})
    return {"$or": clauses}


class MemberService:
    @staticmethod
    async def list_all() -> List[Member]:
        db = await get_database()
        docs = await db.members.find({"role": "member"}).sort("name", 1).to_list(None)
        return [Member(**doc) for doc in docs]

    @staticmethod
    async def count() -> int:
        db = await get_database()
        return await db.members.count_documents({"role": "member"})

    @staticmethod
    async def find(member_id: str) -> Optional[Member]:
        """Find by id or login handle."""
        db = await get_database()
        doc = await db.members.find_one(member_lookup(member_id))
        if doc:
            return Member(**doc)
        return None

    @staticmethod
    async def get(member_id: str) -> Member:
        member = await MemberService.find(member_id)
        if member is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
        return member

    @staticmethod
    async def summary() -> List[MemberSummaryResponse]:
        """Name, total recorded meals and deposit per member."""
        db = await get_database()
        members = await MemberService.list_all()
        rows = []
        for member in members:
            total_meals = await db.meals.count_documents(
                {"member_id": {"$in": list(member.identifiers())}}
            )
            rows.append(MemberSummaryResponse(
                id=str(member.id),
                user_id=member.user_id,
                name=member.name,
                total_meals=total_meals,
                deposit=member.deposit,
            ))
        return rows

    @staticmethod
    async def create(member_in: MemberCreate) -> Member:
        db = await get_database()
        member = Member(
            user_id=member_in.user_id.strip(),
            name=member_in.name.strip(),
            password_hash=hash_password(member_in.password.strip()),
            email=member_in.email,
            mobile=member_in.mobile.strip() if member_in.mobile else None,
            deposit=member_in.deposit,
            date_of_birth=member_in.date_of_birth,
            joined_at=date.today().isoformat(),
        )
        try:
            await db.members.insert_one(member.to_document())
        except DuplicateKeyError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"User ID '{member.user_id}' is already taken"
            )
        logger.info("Member %s created (%s)", member.id, member.user_id)
        return member

    @staticmethod
    async def update(member_id: str, member_in: MemberUpdate) -> Member:
        db = await get_database()
        oid = to_object_id(member_id)

        update_data = member_in.model_dump(exclude_unset=True)
        update_data["updated_at"] = datetime.now(timezone.utc)

        doc = await db.members.find_one_and_update(
            {"_id": oid},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER
        )
        if not doc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
        logger.info("Member %s updated: %s", member_id, sorted(update_data))
        return Member(**doc)

    @staticmethod
    async def reset_password(member_id: str, new_password: str) -> None:
        db = await get_database()
        result = await db.members.update_one(
            {"_id": to_object_id(member_id)},
            {"$set": {
                "password_hash": hash_password(new_password.strip()),
                "updated_at": datetime.now(timezone.utc)
            }}
        )
        if result.matched_count == 0:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
        logger.info("Password reset for member %s", member_id)

    @staticmethod
    async def delete(member_id: str) -> None:
        db = await get_database()
        result = await db.members.delete_one({"_id": to_object_id(member_id)})
        if result.deleted_count == 0:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
        logger.info("Member %s removed", member_id)
