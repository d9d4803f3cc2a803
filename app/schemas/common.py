from typing import Annotated, Any, Optional

from bson import ObjectId
from fastapi import Path, Query
from pydantic import AliasChoices, BaseModel, BeforeValidator, Field

from app.utils.validation import DATE_PATTERN, MONTH_PATTERN


def _stringify_object_id(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    return value


# Accepts Mongo's `_id` or a plain `id`, always serialized as `id`
DocumentId = Annotated[
    str,
    BeforeValidator(_stringify_object_id),
    Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="id"),
]

Month = Annotated[str, Field(pattern=MONTH_PATTERN)]
IsoDate = Annotated[str, Field(pattern=DATE_PATTERN)]

# Path and query parameter forms
MonthPath = Annotated[str, Path(pattern=MONTH_PATTERN)]
DatePath = Annotated[str, Path(pattern=DATE_PATTERN)]
MonthQuery = Annotated[Optional[str], Query(pattern=MONTH_PATTERN)]
DateQuery = Annotated[Optional[str], Query(pattern=DATE_PATTERN)]


class MessageResponse(BaseModel):
    message: str


class DeletedCountResponse(MessageResponse):
    deleted_count: int = 0


class ModifiedCountResponse(MessageResponse):
    modified_count: int = 0


class PasswordConfirm(BaseModel):
    """Body for bulk deletions protected by a feature password."""
    password: str
