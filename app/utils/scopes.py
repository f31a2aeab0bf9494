"""
Project-scoped permission checks.

A user document carries role assignments:

    {"roles": [{"roles": ["responses:w"], "project": "<projectId>"},
               {"roles": ["global-admin"], "project": "GLOBAL"}]}

Assignments on GLOBAL apply to every project. Role documents in the
`roles` collection list their `children`, which are granted with them.
Holding `<domain>:w` also grants `<domain>:r`.
"""

from typing import Any, Dict, Iterable, List, Optional, Set, Union

from pymongo.database import Database

from app.schemas.users import GLOBAL_PROJECT
from app.utils.exceptions import Unauthorized
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _expand_roles(db: Database, names: Iterable[str]) -> Set[str]:
    granted: Set[str] = set(names)
    frontier = list(granted)
    while frontier:
        children: List[str] = []
        for role in db.roles.find({"_id": {"$in": frontier}}, {"children": 1}):
            for child in role.get("children") or []:
                name = child.get("_id") if isinstance(child, dict) else child
                if name and name not in granted:
                    granted.add(name)
                    children.append(name)
        frontier = children
    return granted


def user_scopes(db: Database, user: Dict[str, Any], project_id: Optional[str]) -> Set[str]:
    """All role and permission names the user holds on a project."""
    names: Set[str] = set()
    for assignment in user.get("roles") or []:
        if assignment.get("project") in (project_id, GLOBAL_PROJECT):
            names.update(assignment.get("roles") or [])
    return _expand_roles(db, names)


def can(
    db: Database,
    scopes: Union[str, List[str]],
    project_id: Optional[str],
    user: Optional[Dict[str, Any]],
) -> bool:
    """True when the user holds any of `scopes` on the project."""
    if not user:
        return False
    if isinstance(scopes, str):
        scopes = [scopes]
    granted = user_scopes(db, user, project_id)
    for scope in scopes:
        if scope in granted:
            return True
        domain, _, action = scope.rpartition(":")
        if action == "r" and f"{domain}:w" in granted:
            return True
    return False


def check_if_can(
    db: Database,
    scopes: Union[str, List[str]],
    project_id: Optional[str],
    user: Optional[Dict[str, Any]],
) -> None:
    if not can(db, scopes, project_id, user):
        user_id = user.get("_id") if user else None
        logger.warning(f"[Scopes] 403: user={user_id} lacks {scopes} on project={project_id}")
        raise Unauthorized(f"You do not have the permission to perform this action ({scopes})")
