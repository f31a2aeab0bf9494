"""
MongoDB database connection and helpers.
"""

import uuid
from typing import Optional
from pymongo import MongoClient
from pymongo.database import Database

from app.config import Config


_client: Optional[MongoClient] = None


def get_database(config: Config) -> Database:
    """Get MongoDB database instance. Uses db name 'botfront' (or MONGODB_DB_NAME)."""
    global _client
    if _client is None:
        _client = MongoClient(
            config.mongo.uri,
            serverSelectionTimeoutMS=5000,
        )
    db_name = getattr(config.mongo, "db_name", None) or "botfront"
    return _client.get_database(db_name)


def new_id() -> str:
    """String document id, used for documents created by this service."""
    return uuid.uuid4().hex
