#!/usr/bin/env python3
"""
Create MongoDB indexes.
Run from backend directory: python3 scripts/create_indexes.py
"""
import sys
from pathlib import Path

# Ensure backend root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.config import get_config
from app.db.indexes import ensure_indexes
from app.db.mongo import get_database


def create_indexes():
    """Create all necessary indexes for the application."""
    config = get_config()
    db = get_database(config)

    print(f"Creating indexes for database: {db.name}")
    print("-" * 50)

    for collection_name, index_name in ensure_indexes(db):
        print(f"  ✅ {collection_name}: {index_name}")

    print("\n📊 Index Summary:")
    for collection_name in db.list_collection_names():
        indexes = list(db[collection_name].list_indexes())
        if len(indexes) > 1:  # More than just _id index
            print(f"\n  {collection_name}:")
            for idx in indexes:
                if idx['name'] != '_id_':
                    print(f"    - {idx['name']}: {idx['key']}")


if __name__ == "__main__":
    create_indexes()
