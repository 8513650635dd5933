import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from api import create_app
from api.config import ProductionConfig, TestingConfig, get_config
from models.user import User
from utils.exceptions import StorageError


def test_health_and_root(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"

    resp = client.get("/")
    assert resp.get_json()["docs"] == "/apidocs/"


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "NOT_FOUND", "message": "Resource not found", "status": 404}


def test_storage_failure_is_generic(client, monkeypatch, caplog):
    def failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(Session, "commit", failing_commit)
    resp = client.post("/api/v1/auth/logout", json={"refreshToken": "x"})
    assert resp.status_code == 500
    assert resp.get_json() == {
        "error": "INTERNAL_ERROR",
        "message": "An unexpected error occurred",
        "status": 500,
    }
    assert "disk I/O" not in resp.get_data(as_text=True)
    assert "Storage failure" in caplog.text


def test_transaction_wraps_storage_errors(storage):
    with pytest.raises(StorageError):
        with storage.transaction() as session:
            session.add(User(email="eleve@example.com", password_hash="x"))


def test_swagger_spec_lists_routes(client):
    paths = client.get("/swagger.json").get_json()["paths"]
    assert "/api/v1/auth/login" in paths
    assert "/api/v1/products" in paths


def test_config_selection():
    assert get_config("prod") is ProductionConfig
    assert get_config("testing") is TestingConfig


def test_cli_seed_is_idempotent(tmp_path):
    app = create_app("testing", {"DATABASE_URL": f"sqlite:///{tmp_path / 'cli.db'}"})
    runner = app.test_cli_runner()

    result = runner.invoke(args=["seed-db"])
    assert "Seeded 3 categories, 20 products, 3 users" in result.output

    result = runner.invoke(args=["seed-db"])
    assert "Seeded 0 categories, 0 products, 0 users" in result.output

    result = runner.invoke(args=["purge-tokens"])
    assert "Purged 0 refresh tokens" in result.output

