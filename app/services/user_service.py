"""
User Service

Creates and edits user accounts and their per-project role assignments.
Role names and project ids are checked against the live `roles` and
`projects` collections at call time.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.config import Config
from app.db.mongo import get_database, new_id
from app.schemas.users import GLOBAL_PROJECT, UserCreateSchema, UserEditSchema, ValidationContext
from app.utils.datetime_utils import get_now_utc
from app.utils.exceptions import Conflict, InvalidArgument, NotFound, StoreFailure, ValidationFailed
from app.utils.logger import get_logger
from app.utils.scopes import check_if_can

logger = get_logger(__name__)


class UserService:
    """Service for managing user accounts using MongoDB"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["users"]

    def _store_failure(self, action: str, e: Exception) -> StoreFailure:
        logger.error(f"[UserService] Error {action}: {e}", exc_info=True)
        return StoreFailure("Server Error")

    def _find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            return self.col.find_one(query, {"_id": 1, "emails": 1})
        except PyMongoError as e:
            raise self._store_failure("reading users", e)

    def build_validation_context(self) -> ValidationContext:
        try:
            return ValidationContext.build(
                role_names=[r["_id"] for r in self.db.roles.find({}, {"_id": 1})],
                project_ids=[p["_id"] for p in self.db.projects.find({}, {"_id": 1})],
            )
        except PyMongoError as e:
            raise self._store_failure("reading roles and projects", e)

    def _validate(self, schema, data: Dict[str, Any]):
        try:
            return schema.model_validate(data, context=self.build_validation_context().as_pydantic_context())
        except ValidationError as e:
            raise ValidationFailed(f"Invalid user: {e.errors(include_url=False)}")

    def create_user(self, data: Any, user: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise InvalidArgument("Expected user to be an object")
        check_if_can(self.db, "users:w", GLOBAL_PROJECT, user)
        new_user = self._validate(UserCreateSchema, data)

        email = str(new_user.email).lower()
        if self._find_one({"emails.address": email}):
            raise Conflict("User already exists")

        doc = {
            "_id": new_id(),
            "emails": [{"address": email, "verified": False}],
            "profile": new_user.profile.model_dump(),
            "roles": [r.model_dump() for r in new_user.roles],
            "enrollmentEmailPending": new_user.sendEmail,
            "createdAt": get_now_utc().isoformat(),
        }
        try:
            self.col.insert_one(doc)
        except DuplicateKeyError:
            raise Conflict("User already exists")
        except PyMongoError as e:
            raise self._store_failure("creating user", e)
        logger.info(f"[UserService] User created: id={doc['_id']}")
        return doc

    def edit_user(self, user_id: Any, data: Any, user: Optional[Dict[str, Any]]) -> int:
        if not isinstance(user_id, str):
            raise InvalidArgument("Expected userId to be a string")
        if not isinstance(data, dict):
            raise InvalidArgument("Expected user to be an object")
        check_if_can(self.db, "users:w", GLOBAL_PROJECT, user)
        data = {**data, "_id": data.get("_id", user_id)}
        if data["_id"] != user_id:
            raise InvalidArgument("User id does not match")
        edited = self._validate(UserEditSchema, data)

        existing = self._find_one({"_id": user_id})
        if not existing:
            raise NotFound("User not found")
        # verified flags stay as stored, new addresses start unverified
        stored = {e.get("address"): bool(e.get("verified")) for e in existing.get("emails") or []}
        emails = []
        for e in edited.emails:
            address = str(e.address).lower()
            emails.append({"address": address, "verified": stored.get(address, False)})

        addresses = [e["address"] for e in emails]
        if addresses and self._find_one({"_id": {"$ne": user_id}, "emails.address": {"$in": addresses}}):
            raise Conflict("User already exists")

        try:
            r = self.col.update_one(
                {"_id": user_id},
                {"$set": {
                    "emails": emails,
                    "profile": edited.profile.model_dump(),
                    "roles": [role.model_dump() for role in edited.roles],
                    "updatedAt": get_now_utc().isoformat(),
                }},
            )
        except DuplicateKeyError:
            raise Conflict("User already exists")
        except PyMongoError as e:
            raise self._store_failure("updating user", e)
        return r.matched_count
