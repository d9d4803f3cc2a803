from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from tests.factories import MEMBER_ID, make_cursor, member_doc

FUTURE = "2999-05-10"


def _claim_doc(date, member=MEMBER_ID, status="pending", request_type="request"):
    return {
        "_id": ObjectId(),
        "date": date,
        "assigned_member_id": member,
        "status": status,
        "request_type": request_type,
    }


def test_member_requests_a_day(client, as_member, mock_db):
    mock_db.members.find_one.return_value = member_doc("Rahul", "rahul", oid=MEMBER_ID)

    response = client.post("/api/market", json={"date": FUTURE, "assigned_member_id": MEMBER_ID})

    assert response.status_code == 201
    assert response.json()["status"] == "pending"
    alert = mock_db.notifications.insert_one.call_args[0][0]
    assert alert["user_id"] == "admin"
    assert alert["type"] == "market_request"


def test_member_quota(client, as_member, mock_db):
    mock_db.members.find_one.return_value = member_doc("Rahul", "rahul", oid=MEMBER_ID)
    mock_db.market_requests.find.return_value = make_cursor([
        _claim_doc(f"2999-05-0{d}") for d in range(1, 5)
    ])

    response = client.post("/api/market", json={"date": FUTURE, "assigned_member_id": MEMBER_ID})

    assert response.status_code == 400
    mock_db.market_requests.insert_one.assert_not_called()


def test_quota_counts_claims_made_under_the_login_handle(client, as_member, mock_db):
    mock_db.members.find_one.return_value = member_doc("Rahul", "rahul", oid=MEMBER_ID)
    mock_db.market_requests.find.return_value = make_cursor([
        _claim_doc(f"2999-05-0{d}") for d in range(1, 5)
    ])

    response = client.post("/api/market", json={"date": FUTURE, "assigned_member_id": "rahul"})

    assert response.status_code == 400
    mock_db.market_requests.insert_one.assert_not_called()


def test_claim_by_handle_is_stored_under_document_id(client, as_member, mock_db):
    mock_db.members.find_one.return_value = member_doc("Rahul", "rahul", oid=MEMBER_ID)

    response = client.post("/api/market", json={"date": FUTURE, "assigned_member_id": "rahul"})

    assert response.status_code == 201
    stored = mock_db.market_requests.insert_one.call_args[0][0]
    assert stored["assigned_member_id"] == MEMBER_ID


def test_member_cannot_request_for_others(client, as_member, mock_db):
    response = client.post("/api/market", json={"date": FUTURE, "assigned_member_id": "priya"})

    assert response.status_code == 403


def test_member_cannot_assign_directly(client, as_member, mock_db):
    response = client.post("/api/market", json={
        "date": FUTURE, "assigned_member_id": MEMBER_ID, "request_type": "manual_assign"
    })

    assert response.status_code == 403


def test_past_month_is_read_only_for_members(client, as_member, mock_db):
    response = client.post("/api/market", json={"date": "2001-01-10", "assigned_member_id": MEMBER_ID})

    assert response.status_code == 400


def test_first_claim_wins(client, as_member, mock_db):
    mock_db.members.find_one.return_value = member_doc("Rahul", "rahul", oid=MEMBER_ID)
    mock_db.market_requests.insert_one.side_effect = DuplicateKeyError("dup")

    response = client.post("/api/market", json={"date": FUTURE, "assigned_member_id": MEMBER_ID})

    assert response.status_code == 409


def test_admin_assignment_is_approved(client, as_admin, mock_db):
    mock_db.members.find_one.return_value = member_doc("Priya", "priya")

    response = client.post("/api/market", json={
        "date": FUTURE, "assigned_member_id": "priya", "request_type": "manual_assign"
    })

    assert response.status_code == 201
    assert response.json()["status"] == "approved"
    mock_db.notifications.insert_one.assert_not_called()


def test_member_cannot_approve(client, as_member, mock_db):
    mock_db.market_requests.find_one.return_value = _claim_doc(FUTURE)

    response = client.put(f"/api/market/{FUTURE}", json={"status": "approved"})

    assert response.status_code == 403


def test_admin_approves(client, as_admin, mock_db):
    mock_db.market_requests.find_one.return_value = _claim_doc(FUTURE)
    mock_db.market_requests.find_one_and_update.return_value = _claim_doc(FUTURE, status="approved")

    response = client.put(f"/api/market/{FUTURE}", json={"status": "approved"})

    assert response.status_code == 200
    assert response.json()["status"] == "approved"
    mock_db.notifications.delete_many.assert_called_once_with({"type": "market_request", "metadata.date": FUTURE})
    assert mock_db.notifications.insert_one.call_args[0][0]["type"] == "market_approved"


def test_requester_cancels_pending_claim(client, as_member, mock_db):
    mock_db.market_requests.find_one.return_value = _claim_doc(FUTURE)

    response = client.put(f"/api/market/{FUTURE}", json={"status": "rejected"})

    assert response.status_code == 200
    assert response.json() == {"message": "Market request rejected"}
    mock_db.market_requests.delete_one.assert_called_once_with({"date": FUTURE})
    mock_db.notifications.insert_one.assert_not_called()


def test_requester_cannot_cancel_approved_claim(client, as_member, mock_db):
    mock_db.market_requests.find_one.return_value = _claim_doc(FUTURE, status="approved")

    response = client.put(f"/api/market/{FUTURE}", json={"status": "rejected"})

    assert response.status_code == 403


def test_requester_cannot_cancel_in_past_month(client, as_member, mock_db):
    mock_db.market_requests.find_one.return_value = _claim_doc("2001-01-10")

    response = client.put("/api/market/2001-01-10", json={"status": "rejected"})

    assert response.status_code == 400
    mock_db.market_requests.delete_one.assert_not_called()


def test_admin_can_reject_in_past_month(client, as_admin, mock_db):
    mock_db.market_requests.find_one.return_value = _claim_doc("2001-01-10")

    response = client.put("/api/market/2001-01-10", json={"status": "rejected"})

    assert response.status_code == 200
    mock_db.market_requests.delete_one.assert_called_once_with({"date": "2001-01-10"})


def test_calendar(client, as_member, mock_db):
    mock_db.market_requests.find.return_value = make_cursor([_claim_doc("2024-05-15", status="approved")])

    response = client.get("/api/market/calendar/2024-05")

    assert response.status_code == 200
    weeks = response.json()["weeks"]
    cells = {c["date"]: c for week in weeks for c in week if c}
    assert len(cells) == 31
    assert cells["2024-05-15"]["status"] == "approved"
