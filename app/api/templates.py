from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from app.services.container import (
    template_service,
)
from app.services.template_service import DEFAULT_LANGUAGE
from app.utils.logger import get_logger
from app.utils.auth_dependencies import get_current_user

logger = get_logger(__name__)

# Bot responses stored in the project document
router = APIRouter(tags=["Templates"])


@router.get("/projects/{project_id}/templates", response_model=List[Dict[str, Any]])
def download_templates(
    project_id: str,
    current_user: dict = Depends(get_current_user)
):
    """
    Get every template of a project.
    """
    return template_service.download(project_id, current_user)


@router.post("/projects/{project_id}/templates")
def insert_template(
    project_id: str,
    item: Any = Body(...),
    current_user: dict = Depends(get_current_user)
):
    """
    Add a template. Fails with `template-collision` if its key is taken.
    """
    template_service.insert_template(project_id, item, current_user)
    return {"success": True}


@router.get("/projects/{project_id}/templates/languages", response_model=List[str])
def get_template_languages(
    project_id: str,
    current_user: dict = Depends(get_current_user)
):
    return template_service.get_languages(project_id, current_user)


@router.post("/projects/{project_id}/templates/import")
def import_templates(
    project_id: str,
    templates: Any = Body(...),
    current_user: dict = Depends(get_current_user)
):
    """
    Import templates from a list or a JSON string.
    Templates whose key already exists replace the stored ones.
    """
    template_service.import_templates(project_id, templates, current_user)
    return {"success": True}


@router.post("/projects/{project_id}/templates/remove")
def remove_templates(
    project_id: str,
    keys: Any = Body(...),
    current_user: dict = Depends(get_current_user)
):
    """
    Remove templates by key. The body is a key or a list of keys.
    """
    return {"updated": template_service.remove_by_key(project_id, keys, current_user)}


@router.get("/projects/{project_id}/templates/intents/{intent}", response_model=bool)
def intent_has_templates(
    project_id: str,
    intent: str,
    current_user: dict = Depends(get_current_user)
):
    """
    Whether any template is triggered by `intent`.
    """
    return template_service.count_with_intent(project_id, intent, current_user)


@router.put("/projects/{project_id}/templates/{key}")
def update_template(
    project_id: str,
    key: str,
    item: Any = Body(...),
    current_user: dict = Depends(get_current_user)
):
    return {"updated": template_service.update_template(project_id, key, item, current_user)}


@router.delete("/projects/{project_id}/templates/{key}")
def delete_template(
    project_id: str,
    key: str,
    lang: str = DEFAULT_LANGUAGE,
    current_user: dict = Depends(get_current_user)
):
    return {"updated": template_service.delete_template(project_id, key, lang, current_user)}


@router.post("/projects/{project_id}/templates/{key}/find")
def find_template(
    project_id: str,
    key: str,
    lang: str = DEFAULT_LANGUAGE,
    current_user: dict = Depends(get_current_user)
):
    """
    Get a template, creating it (or its `lang` value) with default content.
    """
    return template_service.find_template(project_id, key, lang, current_user)
