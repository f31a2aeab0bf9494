"""
Slot Service

Handles NLU slot definitions stored in MongoDB.
"""

from typing import Any, Dict, List, NoReturn, Optional

from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.config import Config
from app.db.mongo import get_database, new_id
from app.schemas.slots import SLOT_SCHEMAS
from app.utils.exceptions import Conflict, InvalidArgument, StoreFailure, ValidationFailed
from app.utils.logger import get_logger
from app.utils.scopes import check_if_can

logger = get_logger(__name__)


def validate_slot(slot: Dict[str, Any]) -> None:
    """Validate a slot against the schema selected by its `type`."""
    slot_type = slot.get("type")
    if not slot_type:
        raise ValidationFailed("Slot type is required")
    schema = SLOT_SCHEMAS.get(slot_type)
    if schema is None:
        raise ValidationFailed(f"Unknown slot type '{slot_type}'")
    try:
        schema.model_validate(slot)
    except ValidationError as e:
        raise ValidationFailed(f"Invalid {slot_type} slot: {e.errors(include_url=False)}")


def handle_error(e: Exception) -> NoReturn:
    if isinstance(e, DuplicateKeyError):
        raise Conflict("Slot already exists")
    logger.error(f"[SlotService] Store error: {e}", exc_info=True)
    raise StoreFailure("Server Error")


class SlotService:
    """Service for managing NLU slots using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["slots"]

    def _check_call(self, slot: Any, project_id: Any, user: Optional[Dict[str, Any]]) -> None:
        if not isinstance(slot, dict):
            raise InvalidArgument("Expected slot to be an object")
        if not isinstance(project_id, str):
            raise InvalidArgument("Expected projectId to be a string")
        check_if_can(self.db, "stories:w", project_id, user)
        validate_slot(slot)
        if slot["projectId"] != project_id:
            raise InvalidArgument("Slot does not belong to this project")

    def insert(self, slot: Any, project_id: Any, user: Optional[Dict[str, Any]]) -> str:
        self._check_call(slot, project_id, user)
        doc = dict(slot)
        if not doc.get("_id"):
            doc["_id"] = new_id()
        try:
            r = self.col.insert_one(doc)
        except PyMongoError as e:
            handle_error(e)
        logger.info(f"[SlotService] Slot inserted: id={r.inserted_id}, project={project_id}")
        return r.inserted_id

    def update(self, slot: Any, project_id: Any, user: Optional[Dict[str, Any]]) -> int:
        self._check_call(slot, project_id, user)
        fields = {k: v for k, v in slot.items() if k != "_id"}
        try:
            r = self.col.update_one({"_id": slot.get("_id"), "projectId": project_id}, {"$set": fields})
        except PyMongoError as e:
            handle_error(e)
        return r.matched_count

    def delete(self, slot: Any, project_id: Any, user: Optional[Dict[str, Any]]) -> int:
        self._check_call(slot, project_id, user)
        if slot.get("_id"):
            selector = {"_id": slot["_id"], "projectId": project_id}
        else:
            selector = {"projectId": slot["projectId"], "name": slot["name"]}
        try:
            r = self.col.delete_one(selector)
        except PyMongoError as e:
            handle_error(e)
        logger.info(f"[SlotService] Slot deleted: selector={selector}, deleted={r.deleted_count}")
        return r.deleted_count

    def get_slots(self, project_id: Any) -> List[Dict[str, Any]]:
        if not isinstance(project_id, str):
            raise InvalidArgument("Expected projectId to be a string")
        try:
            return list(self.col.find({"projectId": project_id}))
        except PyMongoError as e:
            handle_error(e)
