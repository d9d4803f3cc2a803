from bson import ObjectId
from fastapi import HTTPException, status

from app.db.mongo import mongodb


async def get_database():
    """Return the active database connection."""
    return mongodb.db


def to_object_id(value: str) -> ObjectId:
    """Parse a path/body id, answering 400 for malformed values."""
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid ID")
    return ObjectId(value)
