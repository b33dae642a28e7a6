"""Template Service - reusable cover letters and emails with {{variable}} placeholders"""

import logging
import re
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..database.job_database import JobDatabase, get_job_database
from ..errors import NotFoundError, PermissionDeniedError
from ..models.user_models import CurrentUser
from ..models.template_models import (
    Template,
    TemplateCreate,
    TemplatePreview,
    TemplatePreviewResponse,
    TemplateUpdate,
)

logger = logging.getLogger(__name__)

ALL = "all"
PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def extract_variables(content: str) -> List[str]:
    """Placeholder names in order of first appearance"""
    return list(dict.fromkeys(PLACEHOLDER.findall(content)))


def render(text: Optional[str], values: Dict[str, str]) -> Optional[str]:
    """Substitute known placeholders; unknown ones are left as written"""
    if text is None:
        return None
    return PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), text)


def default_preview_values(user: dict, now: datetime) -> Dict[str, str]:
    """Sample values used for any placeholder the caller does not supply"""
    return {
        "yourName": user["name"],
        "yourEmail": user["email"],
        "yourPhone": "+1 (555) 123-4567",
        "yourLocation": user.get("location") or "",
        "companyName": "ABC Company",
        "position": "Software Engineer",
        "hiringManager": "Hiring Manager",
        "date": f"{now:%B} {now.day}, {now.year}",
        "currentDate": f"{now.month}/{now.day}/{now.year}",
    }


class TemplateService:
    """
    Service for a user's message templates.

    Owners and administrators may read or change a template. A template's
    variable list is derived from its content on every write.
    """

    def __init__(self, db: Optional[JobDatabase] = None):
        self.db = db or get_job_database()

    def _get_owned_template(self, user: CurrentUser, template_id: str) -> dict:
        template = self.db.get_template(template_id)
        if not template:
            raise NotFoundError(f"No template with id: {template_id}")
        if not (user.is_admin or template["created_by"] == user.user_id):
            raise PermissionDeniedError("Not authorized to access this template")
        return template

    def create_template(self, user: CurrentUser, data: TemplateCreate) -> Template:
        values = data.model_dump()
        values["variables"] = extract_variables(data.content)
        template_id = self.db.insert_template(user.user_id, values)
        logger.info(f"Created template {template_id} for {user.user_id}")
        return Template(**self.db.get_template(template_id))

    def list_templates(
        self,
        user: CurrentUser,
        template_type: Optional[str] = None,
        favorites_only: bool = False,
    ) -> List[Template]:
        templates = self.db.list_templates(
            user.user_id,
            template_type=None if not template_type or template_type == ALL else template_type,
            favorites_only=favorites_only,
        )
        return [Template(**t) for t in templates]

    def get_template(self, user: CurrentUser, template_id: str) -> Template:
        return Template(**self._get_owned_template(user, template_id))

    def update_template(self, user: CurrentUser, template_id: str, data: TemplateUpdate) -> Template:
        self._get_owned_template(user, template_id)
        changes = data.model_dump(exclude_unset=True)
        changes["variables"] = extract_variables(data.content)
        updated = self.db.update_template(template_id, changes)
        if updated is None:
            raise NotFoundError(f"No template with id: {template_id}")
        return Template(**updated)

    def delete_template(self, user: CurrentUser, template_id: str):
        self._get_owned_template(user, template_id)
        self.db.delete_template(template_id)
        logger.info(f"Deleted template {template_id}")

    def toggle_favorite(self, user: CurrentUser, template_id: str) -> Template:
        self._get_owned_template(user, template_id)
        updated = self.db.toggle_template_favorite(template_id)
        if updated is None:
            raise NotFoundError(f"No template with id: {template_id}")
        return Template(**updated)

    def preview(
        self,
        user: CurrentUser,
        template_id: str,
        variables: Optional[Dict[str, str]] = None,
        now: Optional[datetime] = None,
    ) -> TemplatePreviewResponse:
        """
        Render a template with sample values.

        Caller-supplied variables override the defaults built from the caller's
        profile. The stored template is not changed.
        """
        template = self._get_owned_template(user, template_id)
        profile = self.db.get_user(user.user_id)

        values = default_preview_values(profile, now or datetime.now(timezone.utc))
        values.update(variables or {})

        preview = TemplatePreview(
            **template,
            preview_content=render(template["content"], values),
            preview_subject=render(template["subject"], values),
        )
        return TemplatePreviewResponse(template=preview, variables=values)

    def record_use(self, user: CurrentUser, template_id: str) -> int:
        """Count one use of the template, returns the new usage count"""
        self._get_owned_template(user, template_id)
        count = self.db.increment_template_usage(template_id)
        if count is None:
            raise NotFoundError(f"No template with id: {template_id}")
        return count

    def duplicate(self, user: CurrentUser, template_id: str) -> Template:
        """Copy a template into the caller's collection; the copy is named "<name> (Copy)"."""
        source = self._get_owned_template(user, template_id)
        copy_id = self.db.insert_template(user.user_id, {
            "name": f"{source['name']} (Copy)",
            "type": source["type"],
            "subject": source["subject"],
            "content": source["content"],
            "description": source["description"],
            "variables": source["variables"],
        })
        logger.info(f"Duplicated template {template_id} as {copy_id}")
        return Template(**self.db.get_template(copy_id))
