import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("TIMECARD_SERVICE_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from approval_service.db.session import Base, get_session
from approval_service.main import app
from approval_service.seed.seed_data import seed

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def api():
    app.dependency_overrides[get_session] = override_get_session
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as client:
        yield client
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.clear()


@pytest.fixture
def supervisor(api):
    db = TestingSessionLocal()
    try:
        created = seed(db, "jdoe", "Jordan Doe", "letmein")
        db.commit()
        return {"id": created.id, "username": "jdoe", "password": "letmein"}
    finally:
        db.close()


@pytest.fixture
def auth_headers(api, supervisor):
    response = api.post("/api/auth/login", json={"username": "jdoe", "password": "letmein"})
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture(autouse=True)
def _restore_structlog_config():
    # configure_logging() binds the current sys.stderr; restore the global
    # structlog config so later tests don't write to a closed capture stream.
    import structlog

    saved = structlog.get_config()
    yield
    structlog.configure(**saved)
