"""
Template Service

Handles bot responses ("templates") stored in the `templates` array of
project documents. Every mutation bumps the project's `responsesUpdatedAt`.
"""

import json
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from app.config import Config
from app.db.mongo import get_database
from app.schemas.templates import Template
from app.utils.datetime_utils import now_ms
from app.utils.exceptions import Conflict, InvalidArgument, NotFound, StoreFailure
from app.utils.logger import get_logger
from app.utils.response_utils import default_content, format_newlines, get_template_languages
from app.utils.scopes import check_if_can

logger = get_logger(__name__)

DEFAULT_LANGUAGE = "en"


def _require_str(value: Any, name: str) -> None:
    if not isinstance(value, str):
        raise InvalidArgument(f"Expected {name} to be a string")


def _require_dict(value: Any, name: str) -> None:
    if not isinstance(value, dict):
        raise InvalidArgument(f"Expected {name} to be an object")


def parse_template(item: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return Template.model_validate(item).to_document()
    except ValidationError as e:
        raise InvalidArgument(f"Invalid template: {e.errors(include_url=False)}")


def _store_failure(action: str, e: Exception) -> StoreFailure:
    logger.error(f"[TemplateService] Failed to {action}: {e}", exc_info=True)
    return StoreFailure(str(e))


class TemplateService:
    """Service for managing bot responses inside project documents"""

    def __init__(self, config: Config):
        self.config = config
        self.db = get_database(config)
        self.col = self.db["projects"]

    def _get_templates(self, project_id: str) -> List[Dict[str, Any]]:
        try:
            project = self.col.find_one({"_id": project_id}, {"templates": 1})
        except PyMongoError as e:
            raise _store_failure("load templates", e)
        if not project:
            raise NotFound("Project not found")
        return project.get("templates") or []

    def update_template(self, project_id: Any, key: Any, item: Any, user: Optional[Dict[str, Any]]) -> int:
        _require_str(project_id, "projectId")
        check_if_can(self.db, "responses:w", project_id, user)
        _require_str(key, "key")
        _require_dict(item, "item")

        doc = parse_template(item)
        try:
            doc["values"][0]["sequence"] = format_newlines(doc["values"][0]["sequence"])
        except yaml.YAMLError as e:
            raise InvalidArgument(f"Invalid response content: {e}")

        if doc["key"] != key and any(t.get("key") == doc["key"] for t in self._get_templates(project_id)):
            raise Conflict(
                f"Can not rename template because one already exists with the key {doc['key']}",
                error="template-collision",
                status_code=409,
            )

        try:
            r = self.col.update_one(
                {"_id": project_id, "templates.key": key},
                {"$set": {"templates.$": doc, "responsesUpdatedAt": now_ms()}},
            )
        except PyMongoError as e:
            raise _store_failure("update template", e)
        return r.matched_count

    def delete_template(
        self, project_id: Any, key: Any, lang: Any = DEFAULT_LANGUAGE, user: Optional[Dict[str, Any]] = None
    ) -> int:
        _require_str(project_id, "projectId")
        check_if_can(self.db, "responses:w", project_id, user)
        _require_str(lang, "lang")
        _require_str(key, "key")

        try:
            r = self.col.update_one(
                {"_id": project_id, "templates.key": key},
                {"$pull": {"templates": {"key": key}}, "$set": {"responsesUpdatedAt": now_ms()}},
            )
        except PyMongoError as e:
            raise _store_failure("delete template", e)
        logger.info(f"[TemplateService] Deleted template key={key} project={project_id} matched={r.matched_count}")
        return r.matched_count

    def find_template(
        self, project_id: Any, key: Any, lang: Any = DEFAULT_LANGUAGE, user: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Return the template `key`, creating it or its `lang` value on the fly.

        A missing template is created with one value in `lang` whose content
        is the key itself; a template without `lang` gets that value appended.
        """
        _require_str(project_id, "projectId")
        check_if_can(self.db, "responses:r", project_id, user)
        _require_str(key, "key")
        _require_str(lang, "lang")

        try:
            templates = self._get_templates(project_id)
            template = next((t for t in templates if t.get("key") == key), None)
            new_value = {"lang": lang, "sequence": [{"content": default_content(key)}]}

            if template is None:
                template = {"key": key, "values": [new_value]}
                self.col.update_one(
                    {"_id": project_id, "templates.key": {"$ne": key}},
                    {"$push": {"templates": template}, "$set": {"responsesUpdatedAt": now_ms()}},
                )
                logger.info(f"[TemplateService] Created template key={key} lang={lang} project={project_id}")
                return template

            if not any(v.get("lang") == lang for v in template.get("values") or []):
                self.col.update_one(
                    {"_id": project_id, "templates": {"$elemMatch": {"key": key}}},
                    {"$push": {"templates.$.values": new_value}, "$set": {"responsesUpdatedAt": now_ms()}},
                )
                template.setdefault("values", []).append(new_value)
            return template
        except PyMongoError as e:
            raise _store_failure("find template", e)

    def insert_template(self, project_id: Any, item: Any, user: Optional[Dict[str, Any]]) -> None:
        _require_str(project_id, "projectId")
        check_if_can(self.db, "responses:w", project_id, user)
        _require_dict(item, "item")

        doc = parse_template(item)
        key = doc["key"]
        if any(t.get("key") == key for t in self._get_templates(project_id)):
            raise Conflict(
                f"Can not add template because one already exists with the key {key}",
                error="template-collision",
                status_code=409,
            )

        try:
            self.col.update_one(
                {"_id": project_id},
                {"$push": {"templates": doc}, "$set": {"responsesUpdatedAt": now_ms()}},
            )
        except PyMongoError as e:
            raise _store_failure("insert template", e)

    def download(self, project_id: Any, user: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        _require_str(project_id, "projectId")
        check_if_can(self.db, "responses:r", project_id, user)
        return self._get_templates(project_id)

    def import_templates(
        self, project_id: Any, templates: Union[str, List[Dict[str, Any]]], user: Optional[Dict[str, Any]]
    ) -> None:
        """Add templates, replacing the stored ones that share a key."""
        _require_str(project_id, "projectId")
        check_if_can(self.db, "responses:w", project_id, user)

        if isinstance(templates, str):
            try:
                templates = json.loads(templates)
            except json.JSONDecodeError as e:
                raise InvalidArgument(f"Templates are not valid JSON: {e}")
        if not isinstance(templates, list) or not all(isinstance(t, dict) for t in templates):
            raise InvalidArgument("Expected templates to be a list of objects")

        new_templates = [parse_template(t) for t in templates]
        new_keys = [t["key"] for t in new_templates]
        if len(set(new_keys)) != len(new_keys):
            raise InvalidArgument("Imported templates contain duplicate keys")

        old_keys = {t.get("key") for t in self._get_templates(project_id)}
        pull_keys = [k for k in new_keys if k in old_keys]

        try:
            if pull_keys:
                self.col.update_one(
                    {"_id": project_id},
                    {"$pull": {"templates": {"key": {"$in": pull_keys}}}},
                )
            self.col.update_one(
                {"_id": project_id},
                {"$push": {"templates": {"$each": new_templates}}, "$set": {"responsesUpdatedAt": now_ms()}},
            )
        except PyMongoError as e:
            raise _store_failure("import templates", e)
        logger.info(
            f"[TemplateService] Imported {len(new_templates)} templates into project={project_id} "
            f"(replaced={len(pull_keys)})"
        )

    def remove_by_key(self, project_id: Any, arg: Union[str, List[str]], user: Optional[Dict[str, Any]]) -> int:
        _require_str(project_id, "projectId")
        check_if_can(self.db, "responses:w", project_id, user)
        if isinstance(arg, str):
            keys = [arg]
        elif isinstance(arg, list) and all(isinstance(k, str) for k in arg):
            keys = arg
        else:
            raise InvalidArgument("Expected a key or a list of keys")

        try:
            r = self.col.update_one(
                {"_id": project_id},
                {"$pull": {"templates": {"key": {"$in": keys}}}, "$set": {"responsesUpdatedAt": now_ms()}},
            )
        except PyMongoError as e:
            raise _store_failure("remove templates", e)
        return r.matched_count

    def count_with_intent(self, project_id: Any, intent: Any, user: Optional[Dict[str, Any]]) -> bool:
        # Existence check, callers only need to know whether the intent is used
        _require_str(project_id, "projectId")
        check_if_can(self.db, ["nlu-data:r", "responses:r", "conversations:r"], project_id, user)
        _require_str(intent, "intent")
        try:
            count = self.col.count_documents(
                {"_id": project_id, "templates.match.nlu.intent": intent}, limit=1
            )
        except PyMongoError as e:
            raise _store_failure("count templates", e)
        return count > 0

    def get_languages(self, project_id: Any, user: Optional[Dict[str, Any]]) -> List[str]:
        _require_str(project_id, "projectId")
        check_if_can(self.db, "responses:r", project_id, user)
        return get_template_languages(self._get_templates(project_id))
