"""Test user schemas and user management methods."""
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from app.schemas.users import (
    UserCreateSchema,
    UserEditSchema,
    ValidationContext,
    assignable_roles,
)
from app.services.container import user_service
from app.utils.exceptions import Conflict, NotFound, StoreFailure, Unauthorized, ValidationFailed
from conftest import PROJECT_ID

CONTEXT = ValidationContext.build(
    role_names=["project-admin", "project-viewer", "responses:w", "nlu-data:r"],
    project_ids=[PROJECT_ID],
)


def create_payload(**overrides):
    payload = {
        "profile": {"firstName": "Ada", "lastName": "Lovelace"},
        "email": "ada@example.com",
        "roles": [{"roles": ["project-admin"], "project": PROJECT_ID}],
    }
    payload.update(overrides)
    return payload


def test_assignable_roles_exclude_permissions():
    assert assignable_roles(["project-admin", "responses:w", "nlu-data:r", "owner"]) == {"project-admin", "owner"}


def test_context_always_allows_global():
    assert CONTEXT.projects == {PROJECT_ID, "GLOBAL"}


def test_create_schema_defaults_send_email():
    user = UserCreateSchema.model_validate(create_payload(), context=CONTEXT.as_pydantic_context())

    assert user.sendEmail is True
    assert user.roles[0].project == PROJECT_ID


@pytest.mark.parametrize("overrides", [
    {"email": "not-an-email"},
    {"roles": []},
    {"roles": [{"roles": ["responses:w"], "project": PROJECT_ID}]},
    {"roles": [{"roles": ["project-admin"], "project": "unknown-project"}]},
    {"profile": {"firstName": "Ada"}},
    {"unexpected": True},
])
def test_create_schema_rejects(overrides):
    with pytest.raises(ValidationError):
        UserCreateSchema.model_validate(create_payload(**overrides), context=CONTEXT.as_pydantic_context())


def test_schemas_need_a_validation_context():
    with pytest.raises(ValidationError):
        UserCreateSchema.model_validate(create_payload())


def test_edit_schema():
    data = {
        "_id": "u1",
        "emails": [{"address": "ada@example.com", "verified": True}],
        "profile": {"firstName": "Ada", "lastName": "Lovelace"},
        "roles": [{"roles": ["project-viewer"], "project": "GLOBAL"}],
    }

    user = UserEditSchema.model_validate(data, context=CONTEXT.as_pydantic_context())

    assert user.id == "u1"
    with pytest.raises(ValidationError):
        UserEditSchema.model_validate({**data, "roles": []}, context=CONTEXT.as_pydantic_context())


def test_build_validation_context_reads_live_state(db, project):
    context = user_service.build_validation_context()

    assert "global-admin" in context.roles
    assert "responses:w" not in context.roles
    assert context.projects == {PROJECT_ID, "other-project", "GLOBAL"}


def test_create_user(db, project, admin_user):
    created = user_service.create_user(create_payload(), admin_user)

    stored = db.users.find_one({"_id": created["_id"]})
    assert stored["emails"] == [{"address": "ada@example.com", "verified": False}]
    assert stored["roles"] == [{"roles": ["project-admin"], "project": PROJECT_ID}]
    assert stored["enrollmentEmailPending"] is True

    with pytest.raises(Conflict):
        user_service.create_user(create_payload(), admin_user)


def test_create_user_requires_global_users_write(db, project, editor):
    with pytest.raises(Unauthorized):
        user_service.create_user(create_payload(), editor)


def test_create_user_with_unknown_project_fails(project, admin_user):
    payload = create_payload(roles=[{"roles": ["project-admin"], "project": "deleted-project"}])

    with pytest.raises(ValidationFailed):
        user_service.create_user(payload, admin_user)


def test_edit_user_keeps_verification_of_known_addresses(db, project, admin_user, viewer):
    data = {
        "emails": [
            {"address": "viewer@example.com", "verified": False},
            {"address": "second@example.com", "verified": True},
        ],
        "profile": {"firstName": "Vi", "lastName": "Ewer"},
        "roles": [{"roles": ["project-admin"], "project": PROJECT_ID}],
    }

    assert user_service.edit_user("viewer", data, admin_user) == 1

    stored = db.users.find_one({"_id": "viewer"})
    assert stored["emails"] == [
        {"address": "viewer@example.com", "verified": True},
        {"address": "second@example.com", "verified": False},
    ]
    assert stored["profile"]["firstName"] == "Vi"


def test_edit_user_errors(project, admin_user, viewer):
    data = {
        "emails": [{"address": "admin@example.com"}],
        "profile": {"firstName": "Vi", "lastName": "Ewer"},
        "roles": [{"roles": ["project-viewer"], "project": PROJECT_ID}],
    }

    with pytest.raises(Conflict):
        user_service.edit_user("viewer", data, admin_user)
    with pytest.raises(NotFound):
        user_service.edit_user("ghost", {**data, "emails": []}, admin_user)


def test_user_routes(client, project, admin_headers, editor_headers):
    response = client.post("/users", json=create_payload(), headers=admin_headers)
    assert response.status_code == 201
    user_id = response.json()["_id"]

    response = client.post("/users", json=create_payload(email="bob@example.com"), headers=editor_headers)
    assert response.status_code == 403

    response = client.post("/users", json=create_payload(roles=[]), headers=admin_headers)
    assert response.status_code == 400

    response = client.put(
        f"/users/{user_id}",
        json={
            "emails": [{"address": "ada@example.com"}],
            "profile": {"firstName": "Ada", "lastName": "King"},
            "roles": [{"roles": ["project-viewer"], "project": "GLOBAL"}],
        },
        headers=admin_headers,
    )
    assert response.json() == {"updated": 1}


def test_user_lookup_errors_become_server_error(project, admin_user):
    with patch.object(user_service, "col") as mock_col:
        mock_col.find_one.side_effect = PyMongoError("connection reset")
        with pytest.raises(StoreFailure) as exc:
            user_service.create_user(create_payload(), admin_user)

    assert exc.value.reason == "Server Error"
