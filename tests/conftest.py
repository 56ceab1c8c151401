import os

#baza w pamieci i bez redisa, zanim zaimportujemy aplikacje
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.data.database import Base, engine, SessionLocal  # noqa: E402
from app.main import app  # noqa: E402


@pytest.fixture
def db_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_tables):
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db(db_tables):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def widget():
    return {"name": "Widget", "price": 9.99, "quantity": 5, "stockAvailable": 5}


@pytest.fixture
def create_product(client):
    def _create(**overrides):
        payload = {
            "name": "PostTest Product",
            "price": 199.99,
            "quantity": 20,
            "stockAvailable": 20,
        }
        payload.update(overrides)
        resp = client.post("/api/products", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create
