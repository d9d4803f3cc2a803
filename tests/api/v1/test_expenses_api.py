import re

from bson import ObjectId

from tests.factories import MEMBER_ID, expense_doc, make_cursor


def test_admin_expense_is_approved(client, as_admin, mock_db):
    response = client.post("/api/expenses", json={
        "description": "Gas cylinder",
        "amount": 1100,
        "category": "gas",
        "paid_by": "admin",
        "date": "2024-05-02",
    })

    assert response.status_code == 201
    assert response.json()["status"] == "approved"
    assert mock_db.expenses.insert_one.call_args[0][0]["status"] == "approved"


def test_member_expense_is_pending_and_never_the_admins(client, as_member, mock_db):
    response = client.post("/api/expenses", json={
        "description": "Vegetables",
        "amount": 340,
        "category": "market",
        "paid_by": "admin",
        "date": "2024-05-02",
        "status": "approved",
    })

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["paid_by"] == MEMBER_ID


def test_expense_amount_must_be_positive(client, as_admin, mock_db):
    response = client.post("/api/expenses", json={
        "description": "Refund",
        "amount": 0,
        "category": "others",
        "paid_by": "admin",
        "date": "2024-05-02",
    })

    assert response.status_code == 422


def test_list_expenses_filters_month_and_status(client, as_member, mock_db):
    mock_db.expenses.find.return_value = make_cursor([expense_doc("market", 200, paid_by="rahul", status="pending")])

    response = client.get("/api/expenses", params={"month": "2024-05", "status": "pending"})

    assert response.status_code == 200
    assert response.json()[0]["category"] == "market"
    query = mock_db.expenses.find.call_args[0][0]
    assert query["status"] == "pending"
    assert re.match(query["date"]["$regex"], "2024-05-31")
    assert not re.match(query["date"]["$regex"], "2024-06-01")


def test_list_expenses_rejects_bad_month(client, as_member, mock_db):
    response = client.get("/api/expenses", params={"month": "2024-13"})

    assert response.status_code == 422


def test_approve_all(client, as_admin, mock_db):
    mock_db.expenses.update_many.return_value.modified_count = 3

    response = client.put("/api/expenses/approve-all")

    assert response.status_code == 200
    assert response.json()["modified_count"] == 3
    query, update = mock_db.expenses.update_many.call_args[0]
    assert query == {"status": "pending"}
    assert update["$set"]["status"] == "approved"


def test_member_cannot_approve(client, as_member, mock_db):
    response = client.put("/api/expenses/approve-all")

    assert response.status_code == 403


def test_update_missing_expense(client, as_admin, mock_db):
    response = client.put(f"/api/expenses/{ObjectId()}", json={"amount": 50})

    assert response.status_code == 404


def test_clear_admin_expenses_requires_feature_password(client, as_admin, mock_db):
    mock_db.settings.find_one.return_value = {"key": "clear_expenses_password", "value": "hdelall"}

    response = client.request("DELETE", "/api/expenses/admin/clear-all", json={"password": "wrong"})

    assert response.status_code == 401
    mock_db.expenses.delete_many.assert_not_called()


def test_clear_admin_expenses(client, as_admin, mock_db):
    mock_db.settings.find_one.return_value = {"key": "clear_expenses_password", "value": "hdelall"}
    mock_db.expenses.delete_many.return_value.deleted_count = 7

    response = client.request("DELETE", "/api/expenses/admin/clear-all", json={"password": "hdelall"})

    assert response.status_code == 200
    assert response.json()["deleted_count"] == 7
    mock_db.expenses.delete_many.assert_called_once_with({"paid_by": "admin"})
