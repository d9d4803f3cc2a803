import pytest
from bson import ObjectId
from fastapi import HTTPException
from pymongo.errors import DuplicateKeyError

from app.schemas.duty import DutyAssign
from app.services.duty_service import COOKING, MANAGER, DutyService
from tests.factories import make_cursor, member_doc


@pytest.mark.asyncio
async def test_assign_notifies_when_assigned_by_someone_else(mock_db):
    priya = member_doc("Priya", "priya")
    mock_db.members.find_one.return_value = priya

    record = await DutyService.assign(COOKING, DutyAssign(member_id="priya", date="2024-05-04", assigned_by="admin"))

    assert record.member_name == "Priya"
    mock_db.cooking_records.insert_one.assert_called_once()
    notification = mock_db.notifications.insert_one.call_args[0][0]
    assert notification["user_id"] == str(priya["_id"])
    assert notification["type"] == "cooking_assignment"
    assert "by Admin" in notification["message"]


@pytest.mark.asyncio
async def test_self_assignment_is_silent(mock_db):
    priya = member_doc("Priya", "priya")
    mock_db.members.find_one.return_value = priya

    await DutyService.assign(MANAGER, DutyAssign(member_id="priya", date="2024-05-04", assigned_by="priya"))

    mock_db.manager_records.insert_one.assert_called_once()
    mock_db.notifications.insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_duplicate_duty(mock_db):
    mock_db.members.find_one.return_value = member_doc("Priya", "priya")
    mock_db.cooking_records.insert_one.side_effect = DuplicateKeyError("dup")

    with pytest.raises(HTTPException) as exc:
        await DutyService.assign(COOKING, DutyAssign(member_id="priya", date="2024-05-04"))

    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_managers_for_month_unique_in_order(mock_db):
    mock_db.manager_records.find.return_value = make_cursor([
        {"_id": ObjectId(), "member_id": "b", "member_name": "Bob", "date": "2024-05-01"},
        {"_id": ObjectId(), "member_id": "a", "member_name": "Alice", "date": "2024-05-02"},
        {"_id": ObjectId(), "member_id": "b", "member_name": "Bob", "date": "2024-05-03"},
    ])

    assert await DutyService.managers_for_month("2024-05") == ["Bob", "Alice"]
