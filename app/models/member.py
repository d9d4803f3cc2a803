from typing import Optional

from app.models.base import MongoModel


class Member(MongoModel):
    """A mess member. `user_id` is the login handle, `id` the document key."""
    user_id: str
    name: str
    password_hash: str = ""
    email: Optional[str] = None
    mobile: Optional[str] = None
    role: str = "member"
    deposit: float = 0.0
    date_of_birth: Optional[str] = None
    joined_at: Optional[str] = None

    def identifiers(self) -> set:
        """Every value a record may use to refer to this member."""
        return {str(self.id), self.user_id}


class Admin(MongoModel):
    username: str
    password_hash: str
