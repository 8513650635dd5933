import pytest

from api import create_app
from models import storage as shared_storage
from models.seed import seed_all


@pytest.fixture
def app(tmp_path):
    app = create_app("testing", {"DATABASE_URL": f"sqlite:///{tmp_path / 'test.db'}"})
    seed_all(shared_storage)
    yield app
    shared_storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage(app):
    return shared_storage


@pytest.fixture
def login(client):
    def _login(email="eleve@example.com", password="password123"):
        resp = client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()
    return _login


@pytest.fixture
def auth_headers(login):
    bundle = login()
    return {"Authorization": f"Bearer {bundle['accessToken']}"}
