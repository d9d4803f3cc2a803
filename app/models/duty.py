from app.models.base import MongoModel


class DutyRecord(MongoModel):
    """A member on cooking or manager duty for a date."""
    member_id: str
    member_name: str
    date: str
