import os
# Override settings before any pcbvalues imports
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["ADMIN_TOKEN"] = "test-admin-token"
os.environ["AXIS_COUNT"] = "7"
os.environ["APP_VERSION"] = "v-test"
os.environ["MATCH_WEIGHTS"] = ""

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from pcbvalues.platform.database import Base, get_db
from pcbvalues.main import app
from pcbvalues.platform.middleware import _rate_limit_store
from pcbvalues.models.score import ScoreRecord  # noqa: F401

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_HEADERS = {"X-Admin-Token": "test-admin-token"}


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    Base.metadata.create_all(bind=engine)
    # Clear in-memory rate limit state between tests to prevent 429 bleed-through
    _rate_limit_store.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    _rate_limit_store.clear()
    Base.metadata.drop_all(bind=engine)


# ---------------------------------------------------------------------------
# Sample population (17 stored results on 7 axes)
# ---------------------------------------------------------------------------

SAMPLE_USERS = [
    ["user1", 0, [46.4, 100, 70.8, 10.4, 0, 12.5, 75]],
    ["user2", 0, [48.2, 91.1, 33.3, 66.7, 66.7, 70, 32.5]],
    ["user3", 0, [30.4, 62.5, 35.4, 37.5, 25, 70, 0]],
    ["user4", 0, [41.1, 23.2, 27.1, 37.5, 39.6, 42.5, 42.5]],
    ["user5", 0, [26.8, 92.9, 68.8, 68.8, 62.5, 70, 57.5]],
    ["user6", 0, [62.5, 69.6, 54.2, 75, 77.1, 77.5, 45]],
    ["user7", 0, [60.7, 75, 72.9, 66.7, 75, 67.5, 67.5]],
    ["user8", 0, [53.6, 67.9, 77.1, 66.7, 54.2, 50, 52.5]],
    ["user9", 0, [50, 66.1, 66.7, 52.1, 41.7, 40, 70]],
    ["user10", 0, [33.9, 69.6, 45.8, 33.3, 58.3, 62.5, 97.5]],
    ["user11", 0, [28.6, 80.4, 33.3, 35.4, 31.3, 72.5, 75]],
    ["user12", 0, [57.1, 73.2, 95.8, 56.3, 70.8, 45, 47.5]],
    ["user13", 0, [44.6, 76.8, 27.1, 58.3, 58.3, 62.5, 75]],
    ["user14", 0, [62.5, 80.4, 45.8, 27.1, 41.7, 35, 70]],
    ["user15", 0, [41.1, 76.8, 70.8, 60.4, 79.2, 82.5, 50]],
    ["user16", 0, [71.4, 53.6, 35.4, 62.5, 66.7, 65, 22.5]],
    ["user17", 245, [60.7, 69.6, 91.7, 77.1, 72.9, 65, 40]],
]


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------

_counter = 0


def _unique_name() -> str:
    global _counter
    _counter += 1
    return f"user-{_counter}-{uuid.uuid4().hex[:6]}"


def make_payload(name=None, vals=None, **overrides):
    payload = {
        "name": name or _unique_name(),
        "vals": vals if vals is not None else [50.0] * 7,
        "time": "2026-10-17T09:30:00.000Z",
        "edition": "f",
        "digest": None,
        "takes": 0,
        "version": "v-test",
    }
    payload.update(overrides)
    return payload


def submit_score_via_api(client, override=None, **kwargs):
    """POST a submission payload. Returns the response."""
    params = {"override": override} if override is not None else None
    return client.post("/api/v1/scores", json=make_payload(**kwargs), params=params)
