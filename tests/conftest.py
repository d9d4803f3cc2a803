from contextlib import ExitStack
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.core.auth import CurrentUser, get_current_user
from app.main import app
from tests.factories import ADMIN_ID, MEMBER_ID, make_database

# Every module that looks the database up through get_database()
DB_MODULES = (
    "app.core.auth",
    "app.services.admin_service",
    "app.services.auth_service",
    "app.services.duty_service",
    "app.services.expense_service",
    "app.services.market_service",
    "app.services.meal_service",
    "app.services.member_service",
    "app.services.notification_service",
    "app.services.report_service",
    "app.services.settings_service",
    "app.services.summary_service",
)


@pytest.fixture
def mock_db():
    """A fake database patched into every service."""
    db = make_database()
    with ExitStack() as stack:
        for module in DB_MODULES:
            stack.enter_context(patch(f"{module}.get_database", return_value=db))
        yield db


@pytest.fixture
def admin_user():
    return CurrentUser(id=ADMIN_ID, name="Mess Admin", role="admin")


@pytest.fixture
def member_user():
    return CurrentUser(id=MEMBER_ID, name="Rahul", role="member", user_id="rahul")


@pytest.fixture
def client():
    """Test client without the startup hooks, so no MongoDB is needed."""
    return TestClient(app)


@pytest.fixture
def as_admin(admin_user):
    app.dependency_overrides[get_current_user] = lambda: admin_user
    yield admin_user
    app.dependency_overrides.clear()


@pytest.fixture
def as_member(member_user):
    app.dependency_overrides[get_current_user] = lambda: member_user
    yield member_user
    app.dependency_overrides.clear()
