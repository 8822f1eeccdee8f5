import pytest
from fastapi.testclient import TestClient

from database import Database, get_db, init_db
from main import app


@pytest.fixture
def db(tmp_path):
    database = Database(str(tmp_path / "test.db"))
    init_db(database)
    return database


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_category(client):
    def _make(name, description=None):
        response = client.post("/categories", json={"name": name, "description": description})
        assert response.status_code == 201, response.json()
        return response.json()["data"]
    return _make


@pytest.fixture
def make_product(client):
    def _make(name, price, **fields):
        response = client.post("/products", json={"name": name, "price": price, **fields})
        assert response.status_code == 201, response.json()
        return response.json()["data"]
    return _make
