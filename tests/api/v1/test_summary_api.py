import pytest
from bson import ObjectId

from tests.factories import expense_doc, make_cursor, meal_doc, member_doc

MONTH = "2024-05"


@pytest.fixture
def mess(mock_db):
    """Two members with a month of expenses and meals."""
    alice = member_doc("Alice", "alice", deposit=1000)
    bob = member_doc("Bob", "bob", deposit=500)
    mock_db.members.find.return_value = make_cursor([alice, bob])
    mock_db.expenses.find.return_value = make_cursor([
        expense_doc("gas", 100),
        expense_doc("wifi", 50),
        expense_doc("market", 900, paid_by="alice"),
        expense_doc("deposit", 300, paid_by="bob"),
    ])
    mock_db.meals.find.return_value = make_cursor(
        [meal_doc("alice", f"2024-05-{d:02d}") for d in range(1, 31)]
        + [meal_doc(str(bob["_id"]), f"2024-05-{d:02d}", "dinner") for d in range(1, 11)]
    )
    mock_db.manager_records.find.return_value = make_cursor([
        {"_id": ObjectId(), "member_id": "alice", "member_name": "Alice", "date": "2024-05-01"},
        {"_id": ObjectId(), "member_id": "alice", "member_name": "Alice", "date": "2024-05-02"},
    ])
    return {"alice": alice, "bob": bob}


def test_billing(client, as_admin, mock_db, mess):
    response = client.get(f"/api/summary/{MONTH}/billing")

    assert response.status_code == 200
    data = response.json()
    assert data["per_head"]["per_head_amount"] == 75
    # both members floored at 40 meals
    assert data["meal_charge"]["total_meals"] == 80
    assert data["meal_charge"]["meal_charge"] == pytest.approx(900 / 80)
    alice, bob = data["members"]
    assert alice["meals"] == 30 and alice["is_below_minimum"] is True
    assert bob["balance"] == pytest.approx(40 * 900 / 80 + 75 - 500)


def test_billing_rejects_bad_month(client, as_admin, mock_db):
    response = client.get("/api/summary/2024-13/billing")

    assert response.status_code == 422


def test_summary_is_admin_only(client, as_member, mock_db):
    response = client.get(f"/api/summary/{MONTH}")

    assert response.status_code == 403


def test_month_summary_creates_missing_payment_rows(client, as_admin, mock_db, mess):
    response = client.get(f"/api/summary/{MONTH}")

    assert response.status_code == 200
    data = response.json()
    assert data["managers"] == ["Alice"]
    alice = data["members"][0]
    assert alice["expenses"]["market"] == 900
    assert alice["regular_meals"] == 30
    assert alice["payment_status"] == "pending"

    rows = mock_db.monthly_summaries.insert_many.call_args[0][0]
    assert {row["member_id"] for row in rows} == {str(mess["alice"]["_id"]), str(mess["bob"]["_id"])}


def test_payment_status_derived_from_received_deposits(client, as_admin, mock_db, mess):
    bob = mess["bob"]
    mock_db.members.find_one.return_value = bob
    mock_db.monthly_summaries.find_one_and_update.side_effect = lambda query, update, **kw: {
        "_id": ObjectId(), **update["$set"]
    }

    response = client.put(f"/api/summary/{MONTH}/payment", json={
        "member_id": "bob",
        "deposit_balance": 500,
    })

    assert response.status_code == 200
    data = response.json()
    assert data["received_amount"] == 300
    assert data["payment_status"] == "partial"


def test_payment_status_override(client, as_admin, mock_db, mess):
    mock_db.members.find_one.return_value = mess["bob"]
    mock_db.monthly_summaries.find_one_and_update.side_effect = lambda query, update, **kw: {
        "_id": ObjectId(), **update["$set"]
    }

    response = client.put(f"/api/summary/{MONTH}/payment", json={
        "member_id": "bob",
        "deposit_balance": 500,
        "received_amount": 0,
        "payment_status": "clear",
    })

    assert response.status_code == 200
    assert response.json()["payment_status"] == "clear"


def test_invoice_pdf(client, as_admin, mock_db, mess):
    mock_db.members.find_one.return_value = mess["alice"]

    response = client.get(f"/api/summary/{MONTH}/invoice/alice/pdf")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_invoice_unknown_member(client, as_admin, mock_db):
    response = client.get(f"/api/summary/{MONTH}/invoice/ghost")

    assert response.status_code == 404
