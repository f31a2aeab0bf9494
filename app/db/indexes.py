"""
Index definitions shared by app startup and scripts/create_indexes.py.
"""

from typing import List, Tuple

from pymongo.database import Database

from app.utils.logger import get_logger

logger = get_logger(__name__)


def ensure_indexes(db: Database) -> List[Tuple[str, str]]:
    """Create all indexes (idempotent). Returns (collection, index name) pairs."""
    created = []

    # Slots: one slot name per project
    created.append(("slots", db.slots.create_index([("projectId", 1), ("name", 1)], unique=True)))
    created.append(("slots", db.slots.create_index("projectId")))

    # Projects: template lookups by key
    created.append(("projects", db.projects.create_index("templates.key")))

    # Users
    created.append(("users", db.users.create_index("emails.address")))

    logger.info(f"[Indexes] Ensured {len(created)} indexes on db={db.name}")
    return created
