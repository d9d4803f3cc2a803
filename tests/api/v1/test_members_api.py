from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from tests.factories import make_cursor, member_doc


def test_list_members(client, as_member, mock_db):
    mock_db.members.find.return_value = make_cursor([
        member_doc("Amit", "amit"),
        member_doc("Rahul", "rahul"),
    ])

    response = client.get("/api/members")

    assert response.status_code == 200
    data = response.json()
    assert [m["user_id"] for m in data] == ["amit", "rahul"]
    assert "password_hash" not in data[0]
    assert ObjectId.is_valid(data[0]["id"])
    mock_db.members.find.assert_called_once_with({"role": "member"})


def test_members_summary_counts_meals_by_either_identifier(client, as_member, mock_db):
    doc = member_doc("Rahul", "rahul", deposit=1200)
    mock_db.members.find.return_value = make_cursor([doc])
    mock_db.meals.count_documents.return_value = 44

    response = client.get("/api/members/summary")

    assert response.status_code == 200
    assert response.json() == [{
        "id": str(doc["_id"]),
        "user_id": "rahul",
        "name": "Rahul",
        "total_meals": 44,
        "deposit": 1200,
    }]
    query = mock_db.meals.count_documents.call_args[0][0]
    assert set(query["member_id"]["$in"]) == {str(doc["_id"]), "rahul"}


def test_create_member(client, as_admin, mock_db):
    response = client.post("/api/members", json={
        "name": " Priya ",
        "user_id": "priya",
        "password": "pass1234",
        "deposit": 500,
    })

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Priya"
    assert data["deposit"] == 500
    stored = mock_db.members.insert_one.call_args[0][0]
    assert stored["password_hash"].startswith("$2")
    assert stored["role"] == "member"


def test_create_member_duplicate_user_id(client, as_admin, mock_db):
    mock_db.members.insert_one.side_effect = DuplicateKeyError("dup")

    response = client.post("/api/members", json={"name": "Priya", "user_id": "priya", "password": "pass1234"})

    assert response.status_code == 409


def test_member_cannot_create_members(client, as_member, mock_db):
    response = client.post("/api/members", json={"name": "X", "user_id": "x", "password": "pass1234"})

    assert response.status_code == 403
    mock_db.members.insert_one.assert_not_called()


def test_delete_unknown_member(client, as_admin, mock_db):
    mock_db.members.delete_one.return_value.deleted_count = 0

    response = client.delete(f"/api/members/{ObjectId()}")

    assert response.status_code == 404
