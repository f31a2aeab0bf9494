"""Pytest configuration and fixtures."""
import os

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["MONGODB_DB_NAME"] = "botfront_test"

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.db import mongo

# Every service shares the lazily created client, swap it before they are built
mongo._client = mongomock.MongoClient()

from app.config import get_config  # noqa: E402
from app.db.indexes import ensure_indexes  # noqa: E402
from app.db.roles import seed_roles  # noqa: E402
from app.main import app  # noqa: E402
from app.services.container import auth_service  # noqa: E402

PROJECT_ID = "bf-project"
OTHER_PROJECT_ID = "other-project"


@pytest.fixture
def db():
    """Clean mongomock database with indexes and default roles."""
    database = mongo.get_database(get_config())
    for name in ("slots", "projects", "users", "roles"):
        database[name].delete_many({})
    ensure_indexes(database)
    seed_roles(database)
    yield database


@pytest.fixture
def client(db):
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def project(db):
    """Project with one English response."""
    doc = {
        "_id": PROJECT_ID,
        "name": "Test Bot",
        "templates": [
            {
                "key": "utter_greet",
                "values": [{"lang": "en", "sequence": [{"content": "text: Hello\n"}]}],
                "match": {"nlu": [{"intent": "greet", "entities": []}]},
            }
        ],
    }
    db.projects.insert_one(doc)
    db.projects.insert_one({"_id": OTHER_PROJECT_ID, "name": "Other Bot", "templates": []})
    return doc


def _make_user(db, user_id, roles):
    user = {
        "_id": user_id,
        "emails": [{"address": f"{user_id}@example.com", "verified": True}],
        "profile": {"firstName": user_id, "lastName": "Tester"},
        "roles": roles,
    }
    db.users.insert_one(user)
    return user


@pytest.fixture
def admin_user(db):
    return _make_user(db, "admin", [{"roles": ["global-admin"], "project": "GLOBAL"}])


@pytest.fixture
def editor(db):
    return _make_user(db, "editor", [{"roles": ["project-admin"], "project": PROJECT_ID}])


@pytest.fixture
def viewer(db):
    return _make_user(db, "viewer", [{"roles": ["project-viewer"], "project": PROJECT_ID}])


@pytest.fixture
def outsider(db):
    return _make_user(db, "outsider", [{"roles": ["project-admin"], "project": OTHER_PROJECT_ID}])


def headers_for(user):
    return {"Authorization": f"Bearer {auth_service.generate_token(user['_id'])}"}


@pytest.fixture
def admin_headers(admin_user):
    return headers_for(admin_user)


@pytest.fixture
def editor_headers(editor):
    return headers_for(editor)


@pytest.fixture
def viewer_headers(viewer):
    return headers_for(viewer)


@pytest.fixture
def outsider_headers(outsider):
    return headers_for(outsider)
