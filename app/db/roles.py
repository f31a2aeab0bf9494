"""
Default role definitions.

Permission names are `<domain>:<r|w>`; the other roles bundle them as
children and are the ones assignable to users.
"""

from typing import Any, Dict, List

from pymongo.database import Database

PERMISSIONS = [
    "stories:r", "stories:w",
    "responses:r", "responses:w",
    "nlu-data:r", "nlu-data:w",
    "conversations:r", "conversations:w",
    "users:r", "users:w",
]

DEFAULT_ROLES: Dict[str, List[str]] = {
    "global-admin": PERMISSIONS,
    "project-admin": [p for p in PERMISSIONS if not p.startswith("users:")],
    "project-viewer": [p for p in PERMISSIONS if p.endswith(":r") and not p.startswith("users:")],
}


def role_documents() -> List[Dict[str, Any]]:
    docs = [{"_id": name, "children": []} for name in PERMISSIONS]
    for name, children in DEFAULT_ROLES.items():
        docs.append({"_id": name, "children": [{"_id": c} for c in children]})
    return docs


def seed_roles(db: Database) -> int:
    """Upsert the default roles. Returns the number of new roles."""
    created = 0
    for doc in role_documents():
        r = db.roles.update_one({"_id": doc["_id"]}, {"$set": {"children": doc["children"]}}, upsert=True)
        if r.upserted_id is not None:
            created += 1
    return created
