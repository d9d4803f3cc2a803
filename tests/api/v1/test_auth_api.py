"""
Test authentication endpoints
"""
import pytest
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from app.core.security import create_access_token, hash_password
from app.main import app
from tests.factories import ADMIN_ID, MEMBER_ID


@pytest.mark.asyncio
async def test_admin_login(mock_db):
    mock_db.admins.find_one.return_value = {
        "_id": ObjectId(ADMIN_ID),
        "username": "Admin",
        "password_hash": hash_password("secret99"),
    }

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/auth/login",
            json={"user_id": "admin", "password": "secret99", "role": "admin"}
        )

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"] == {"id": ADMIN_ID, "name": "Mess Admin", "role": "admin", "user_id": None}


@pytest.mark.asyncio
async def test_member_login(mock_db):
    mock_db.members.find_one.return_value = {
        "_id": ObjectId(MEMBER_ID),
        "user_id": "rahul",
        "name": "Rahul",
        "password_hash": hash_password("dal-bhat"),
    }

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/api/auth/login", json={"user_id": "rahul", "password": "dal-bhat"})

    assert response.status_code == 200
    assert response.json()["user"]["user_id"] == "rahul"
    mock_db.members.find_one.assert_called_once_with({"user_id": "rahul"})


@pytest.mark.asyncio
async def test_login_wrong_password(mock_db):
    mock_db.members.find_one.return_value = {
        "_id": ObjectId(MEMBER_ID),
        "user_id": "rahul",
        "name": "Rahul",
        "password_hash": hash_password("dal-bhat"),
    }

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/api/auth/login", json={"user_id": "rahul", "password": "nope"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_unknown_member(mock_db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/api/auth/login", json={"user_id": "ghost", "password": "x"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_verify_with_token(mock_db):
    mock_db.members.find_one.return_value = {"_id": ObjectId(MEMBER_ID), "user_id": "rahul", "name": "Rahul"}
    token = create_access_token({"sub": MEMBER_ID, "role": "member"})

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"id": MEMBER_ID, "name": "Rahul", "role": "member", "user_id": "rahul"}


@pytest.mark.asyncio
async def test_verify_rejects_deleted_member(mock_db):
    token = create_access_token({"sub": MEMBER_ID, "role": "member"})

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_verify_rejects_garbage_token(mock_db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/api/auth/verify", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_change_password_too_short(client, as_member):
    response = client.patch(
        "/api/auth/change-password",
        json={"current_password": "old", "new_password": "abc"}
    )
    assert response.status_code == 422


def test_member_cannot_read_admin_credentials(client, as_member):
    response = client.get("/api/admin/credentials")
    assert response.status_code == 403


def test_admin_credentials(client, as_admin, mock_db):
    mock_db.admins.find_one.return_value = {"_id": ObjectId(ADMIN_ID), "username": "admin", "password_hash": "x"}

    response = client.get("/api/admin/credentials")

    assert response.status_code == 200
    assert response.json() == {"username": "admin"}
