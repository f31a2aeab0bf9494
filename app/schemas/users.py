"""
User create/edit schemas.

Allowed role names and project ids change at runtime, so they are not
enumerated here: callers pass a `ValidationContext` snapshot through
pydantic's validation context, e.g.

    UserCreateSchema.model_validate(data, context=ctx.as_pydantic_context())
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator

GLOBAL_PROJECT = "GLOBAL"

# "responses:w", "nlu-data:r" style names are permissions, not assignable roles
PERMISSION_NAME = re.compile(r"\w+:\w+")


def assignable_roles(role_names: Iterable[str]) -> FrozenSet[str]:
    return frozenset(name for name in role_names if not PERMISSION_NAME.search(name))


@dataclass(frozen=True)
class ValidationContext:
    """Snapshot of the roles and projects a user may be assigned to."""
    roles: FrozenSet[str]
    projects: FrozenSet[str]

    @classmethod
    def build(cls, role_names: Iterable[str], project_ids: Iterable[str]) -> "ValidationContext":
        return cls(
            roles=assignable_roles(role_names),
            projects=frozenset(project_ids) | {GLOBAL_PROJECT},
        )

    def as_pydantic_context(self) -> Dict[str, Any]:
        return {"allowed": self}


def _allowed(info: ValidationInfo) -> ValidationContext:
    allowed = (info.context or {}).get("allowed")
    if not isinstance(allowed, ValidationContext):
        raise ValueError("user schemas must be validated with a ValidationContext")
    return allowed


class UserProfile(BaseModel):
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)


class UserEmail(BaseModel):
    address: EmailStr
    # Computed by UserService from the stored user, client values are ignored
    verified: Optional[bool] = None


class UserRoleSchema(BaseModel):
    roles: List[str]
    project: str

    @field_validator("roles")
    @classmethod
    def roles_are_assignable(cls, roles: List[str], info: ValidationInfo) -> List[str]:
        allowed = _allowed(info)
        for role in roles:
            if role not in allowed.roles:
                raise ValueError(f"'{role}' is not an allowed role")
        return roles

    @field_validator("project")
    @classmethod
    def project_exists(cls, project: str, info: ValidationInfo) -> str:
        if project not in _allowed(info).projects:
            raise ValueError(f"'{project}' is not an allowed project")
        return project


class UserEditSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str = Field(..., alias="_id")
    emails: List[UserEmail]
    profile: UserProfile
    roles: List[UserRoleSchema] = Field(..., min_length=1)


class UserCreateSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    profile: UserProfile
    email: EmailStr
    sendEmail: bool = True
    roles: List[UserRoleSchema] = Field(..., min_length=1)


__all__ = [
    "GLOBAL_PROJECT",
    "ValidationContext",
    "assignable_roles",
    "UserProfile",
    "UserEmail",
    "UserRoleSchema",
    "UserEditSchema",
    "UserCreateSchema",
]
