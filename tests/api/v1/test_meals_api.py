from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from tests.factories import MEMBER_ID, make_cursor, meal_doc, member_doc


def test_member_adds_own_meal(client, as_member, mock_db):
    mock_db.members.find_one.return_value = member_doc("Rahul", "rahul", oid=MEMBER_ID)

    response = client.post("/api/meals", json={"date": "2024-05-03", "member_id": "rahul", "meal_type": "lunch"})

    assert response.status_code == 201
    assert response.json()["member_name"] == "Rahul"
    mock_db.meals.insert_one.assert_called_once()
    assert mock_db.meals.insert_one.call_args[0][0]["member_id"] == MEMBER_ID


def test_member_cannot_add_meal_for_someone_else(client, as_member, mock_db):
    response = client.post("/api/meals", json={"date": "2024-05-03", "member_id": "priya", "meal_type": "lunch"})

    assert response.status_code == 403
    mock_db.meals.insert_one.assert_not_called()


def test_duplicate_meal(client, as_admin, mock_db):
    mock_db.members.find_one.return_value = member_doc("Priya", "priya")
    mock_db.meals.insert_one.side_effect = DuplicateKeyError("dup")

    response = client.post("/api/meals", json={"date": "2024-05-03", "member_id": "priya", "meal_type": "dinner"})

    assert response.status_code == 409


def test_meal_for_unknown_member(client, as_admin, mock_db):
    response = client.post("/api/meals", json={"date": "2024-05-03", "member_id": "ghost", "meal_type": "dinner"})

    assert response.status_code == 404


def test_invalid_meal_type(client, as_admin, mock_db):
    response = client.post("/api/meals", json={"date": "2024-05-03", "member_id": "priya", "meal_type": "breakfast"})

    assert response.status_code == 422


def test_list_meals_by_date(client, as_member, mock_db):
    mock_db.meals.find.return_value = make_cursor([meal_doc("rahul", "2024-05-03")])

    response = client.get("/api/meals", params={"date": "2024-05-03"})

    assert response.status_code == 200
    assert len(response.json()) == 1
    mock_db.meals.find.assert_called_once_with({"date": "2024-05-03"})


def test_remove_meal_not_found(client, as_member, mock_db):
    mock_db.members.find_one.return_value = member_doc("Rahul", "rahul", oid=MEMBER_ID)
    mock_db.meals.delete_one.return_value.deleted_count = 0

    response = client.request(
        "DELETE", "/api/meals", json={"date": "2024-05-03", "member_id": MEMBER_ID, "meal_type": "lunch"}
    )

    assert response.status_code == 404


def test_meal_by_id_and_by_handle_share_one_key(client, as_member, mock_db):
    mock_db.members.find_one.return_value = member_doc("Rahul", "rahul", oid=MEMBER_ID)

    for member_id in (MEMBER_ID, "rahul"):
        response = client.post("/api/meals", json={"date": "2024-05-03", "member_id": member_id, "meal_type": "lunch"})
        assert response.status_code == 201

    stored = [call.args[0]["member_id"] for call in mock_db.meals.insert_one.call_args_list]
    assert stored == [MEMBER_ID, MEMBER_ID]


def test_remove_meal_by_handle_matches_either_identifier(client, as_member, mock_db):
    mock_db.members.find_one.return_value = member_doc("Rahul", "rahul", oid=MEMBER_ID)

    response = client.request(
        "DELETE", "/api/meals", json={"date": "2024-05-03", "member_id": "rahul", "meal_type": "lunch"}
    )

    assert response.status_code == 200
    mock_db.meals.delete_one.assert_called_once_with({
        "date": "2024-05-03",
        "member_id": {"$in": sorted([MEMBER_ID, "rahul"])},
        "meal_type": "lunch",
    })


def test_clear_all_meals(client, as_admin, mock_db):
    mock_db.settings.find_one.return_value = {"key": "clear_all_meals_password", "value": "dame"}
    mock_db.meals.delete_many.return_value.deleted_count = 120

    response = client.request("DELETE", "/api/meals/clear-all", json={"password": "dame"})

    assert response.status_code == 200
    assert response.json()["deleted_count"] == 120


def test_guest_meal_removed_by_host_only(client, as_member, mock_db):
    guest_id = ObjectId()
    mock_db.guest_meals.find_one.return_value = {
        "_id": guest_id,
        "date": "2024-05-03",
        "member_id": "priya",
        "guest_meal_type": "fish",
        "meal_time": "lunch",
    }

    response = client.delete(f"/api/guest-meals/{guest_id}")

    assert response.status_code == 403
    mock_db.guest_meals.delete_one.assert_not_called()


def test_add_guest_meal(client, as_member, mock_db):
    mock_db.members.find_one.return_value = member_doc("Rahul", "rahul", oid=MEMBER_ID)

    response = client.post("/api/guest-meals", json={
        "date": "2024-05-03",
        "member_id": MEMBER_ID,
        "guest_meal_type": "egg",
        "meal_time": "dinner",
    })

    assert response.status_code == 201
    assert response.json()["guest_meal_type"] == "egg"
    assert mock_db.guest_meals.insert_one.call_args[0][0]["member_id"] == MEMBER_ID
