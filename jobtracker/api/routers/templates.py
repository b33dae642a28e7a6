"""Templates API router"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from ..dependencies import get_current_user, get_template_service
from ..models.user_models import CurrentUser
from ..models.template_models import (
    TemplateCreate,
    TemplateUpdate,
    TemplatePreviewRequest,
    TemplateResponse,
    TemplateListResponse,
    TemplatePreviewResponse,
    TemplateUsageResponse,
)
from ..models.responses import ErrorResponse, MessageResponse
from ..services.template_service import TemplateService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/templates", tags=["templates"])

OWNER_ONLY = {403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


@router.post("", response_model=TemplateResponse, status_code=201, summary="Create a template")
async def create_template(
    data: TemplateCreate,
    user: CurrentUser = Depends(get_current_user),
    service: TemplateService = Depends(get_template_service),
) -> TemplateResponse:
    template = service.create_template(user, data)
    return TemplateResponse(msg="Template created successfully", template=template)


@router.get(
    "",
    response_model=TemplateListResponse,
    summary="List templates",
    description="Favorites first, then newest first",
)
async def get_all_templates(
    template_type: Optional[str] = Query(None, alias="type", description="Template type or all"),
    favorite: bool = Query(False, description="Only favorites"),
    user: CurrentUser = Depends(get_current_user),
    service: TemplateService = Depends(get_template_service),
) -> TemplateListResponse:
    templates = service.list_templates(user, template_type=template_type, favorites_only=favorite)
    return TemplateListResponse(templates=templates, count=len(templates))


@router.get("/{template_id}", response_model=TemplateResponse, responses=OWNER_ONLY)
async def get_template(
    template_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: TemplateService = Depends(get_template_service),
) -> TemplateResponse:
    return TemplateResponse(template=service.get_template(user, template_id))


@router.patch("/{template_id}", response_model=TemplateResponse, responses=OWNER_ONLY)
async def update_template(
    template_id: str,
    data: TemplateUpdate,
    user: CurrentUser = Depends(get_current_user),
    service: TemplateService = Depends(get_template_service),
) -> TemplateResponse:
    template = service.update_template(user, template_id, data)
    return TemplateResponse(msg="Template updated successfully", template=template)


@router.delete("/{template_id}", response_model=MessageResponse, responses=OWNER_ONLY)
async def delete_template(
    template_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: TemplateService = Depends(get_template_service),
) -> MessageResponse:
    service.delete_template(user, template_id)
    return MessageResponse(msg="Template deleted successfully")


@router.patch("/{template_id}/favorite", response_model=TemplateResponse, responses=OWNER_ONLY)
async def toggle_favorite(
    template_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: TemplateService = Depends(get_template_service),
) -> TemplateResponse:
    template = service.toggle_favorite(user, template_id)
    msg = "Template added to favorites" if template.is_favorite else "Template removed from favorites"
    return TemplateResponse(msg=msg, template=template)


@router.post(
    "/{template_id}/preview",
    response_model=TemplatePreviewResponse,
    responses=OWNER_ONLY,
    summary="Render a template with sample or supplied values",
)
async def preview_template(
    template_id: str,
    data: Optional[TemplatePreviewRequest] = None,
    user: CurrentUser = Depends(get_current_user),
    service: TemplateService = Depends(get_template_service),
) -> TemplatePreviewResponse:
    return service.preview(user, template_id, data.variables if data else None)


@router.post("/{template_id}/use", response_model=TemplateUsageResponse, responses=OWNER_ONLY)
async def use_template(
    template_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: TemplateService = Depends(get_template_service),
) -> TemplateUsageResponse:
    count = service.record_use(user, template_id)
    return TemplateUsageResponse(msg="Usage count updated", usage_count=count)


@router.post(
    "/{template_id}/duplicate",
    response_model=TemplateResponse,
    status_code=201,
    responses=OWNER_ONLY,
)
async def duplicate_template(
    template_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: TemplateService = Depends(get_template_service),
) -> TemplateResponse:
    template = service.duplicate(user, template_id)
    return TemplateResponse(msg="Template duplicated successfully", template=template)
