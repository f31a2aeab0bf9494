"""Test project-scoped permission checks."""
import inspect

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from app.services.container import auth_service
from app.utils.auth_dependencies import get_current_user
from app.utils.exceptions import Unauthorized
from app.utils.scopes import can, check_if_can, user_scopes
from conftest import OTHER_PROJECT_ID, PROJECT_ID


def test_roles_expand_to_their_permissions(db, editor):
    scopes = user_scopes(db, editor, PROJECT_ID)

    assert {"project-admin", "responses:w", "stories:w"} <= scopes
    assert "users:w" not in scopes


def test_assignments_are_project_scoped(db, editor):
    assert can(db, "responses:w", PROJECT_ID, editor)
    assert not can(db, "responses:w", OTHER_PROJECT_ID, editor)


def test_global_assignments_apply_everywhere(db, admin_user):
    assert can(db, "stories:w", PROJECT_ID, admin_user)
    assert can(db, "stories:w", "any-project", admin_user)
    assert can(db, "users:w", "GLOBAL", admin_user)


def test_write_implies_read(db):
    user = {"_id": "u", "roles": [{"roles": ["responses:w"], "project": PROJECT_ID}]}

    assert can(db, "responses:r", PROJECT_ID, user)
    assert not can(db, "stories:r", PROJECT_ID, user)


def test_any_listed_scope_is_enough(db):
    user = {"_id": "u", "roles": [{"roles": ["conversations:r"], "project": PROJECT_ID}]}

    assert can(db, ["nlu-data:r", "responses:r", "conversations:r"], PROJECT_ID, user)
    assert not can(db, ["nlu-data:r", "responses:r"], PROJECT_ID, user)


def test_nested_roles(db):
    db.roles.insert_one({"_id": "owner", "children": [{"_id": "project-admin"}]})
    user = {"_id": "u", "roles": [{"roles": ["owner"], "project": PROJECT_ID}]}

    assert can(db, "stories:w", PROJECT_ID, user)


def test_check_if_can_raises(db, viewer):
    check_if_can(db, "responses:r", PROJECT_ID, viewer)
    with pytest.raises(Unauthorized):
        check_if_can(db, "responses:w", PROJECT_ID, viewer)
    with pytest.raises(Unauthorized):
        check_if_can(db, "responses:r", PROJECT_ID, None)


def test_current_user_is_loaded_without_an_event_loop(db, viewer):
    credentials = HTTPAuthorizationCredentials(
        scheme="Bearer", credentials=auth_service.generate_token(viewer["_id"])
    )

    assert not inspect.iscoroutinefunction(get_current_user)
    assert get_current_user(credentials, auth_service)["_id"] == "viewer"
