import os
import shutil
import tempfile

# Configure the test database before anything under sehd_api is imported
_TMP_DIR = tempfile.mkdtemp(prefix="sehd-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["APP_ENV"] = "test"
os.environ["DEBUG"] = "true"
os.environ["SEED_DEMO_DATA"] = "true"
os.environ["PASSWORD_SCHEME"] = "legacy"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from sehd_api.db import build_engine, init_db
from sehd_api.main import app
from sehd_api.seed import ensure_demo_data


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as test_client:
        yield test_client
    shutil.rmtree(_TMP_DIR, ignore_errors=True)


@pytest.fixture()
def session():
    """Fresh in-memory database with demo data, isolated per test."""
    memory_engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=memory_engine)
    with Session(memory_engine) as db_session:
        ensure_demo_data(db_session)
        yield db_session
    memory_engine.dispose()


def _login(client: TestClient, email: str, password: str) -> str:
    res = client.post("/api/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()["token"]


@pytest.fixture()
def admin_token(client: TestClient):
    return _login(client, "admin@miami.edu", "admin123")


@pytest.fixture()
def staff_token(client: TestClient):
    return _login(client, "staff@miami.edu", "staff123")


@pytest.fixture()
def viewer_token(client: TestClient):
    return _login(client, "viewer@miami.edu", "viewer123")
