from app.db.mongo import close_mongo_connection
from app.main import app, startup


def test_lifecycle_handlers_registered():
    assert startup in app.router.on_startup
    assert close_mongo_connection in app.router.on_shutdown


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
