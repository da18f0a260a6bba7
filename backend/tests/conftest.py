import os
import tempfile

# Keep the app off the developer database and receipt folder
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RECEIPT_DIR", tempfile.mkdtemp(prefix="shopflow-receipts-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models.log  # noqa: F401
import models.store  # noqa: F401
from database import Base, get_db
from main import app
from schemas.product import Product
from services import cart as cart_service
from store import MemoryStore, SqlStore


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def sql_store(session_factory):
    db = session_factory()
    try:
        yield SqlStore(db)
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    cart_service._sessions.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    cart_service._sessions.clear()


@pytest.fixture
def make_product():
    def _make(**overrides):
        data = dict(
            id="p1", name="Widget", brand="Acme", category="Accessories", hsn="8544",
            price=100, cost=50, gst_percent=18, stock=5, unit="pcs",
        )
        data.update(overrides)
        return Product(**data)
    return _make


@pytest.fixture
def login(client):
    def _login(username="admin"):
        r = client.post("/login", json={"username": username, "password": "anything"})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['access_token']}"}
    return _login
