"""Recipe template endpoints: authoring, bulk import, deployment."""

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from recipe_inventory.api.dependencies import (
    get_create_template_use_case,
    get_deactivate_template_use_case,
    get_deploy_template_use_case,
    get_import_templates_use_case,
    get_tmpl_store,
    get_update_template_use_case,
)
from recipe_inventory.application.dto.converters import template_to_response
from recipe_inventory.application.dto.requests import (
    CreateTemplateRequest,
    DeployTemplateRequest,
    ImportTemplatesRequest,
    UpdateTemplateRequest,
)
from recipe_inventory.application.dto.responses import (
    CreateTemplateResponse,
    DeploymentReportResponse,
    ErrorResponse,
    ImportTemplatesResponse,
    TemplateListResponse,
    TemplateResponse,
)
from recipe_inventory.application.use_cases.create_template import CreateTemplateUseCase
from recipe_inventory.application.use_cases.deploy_template import DeployTemplateUseCase
from recipe_inventory.application.use_cases.import_templates import (
    ImportTemplatesUseCase,
    parse_template_csv,
)
from recipe_inventory.application.use_cases.update_template import (
    DeactivateTemplateUseCase,
    UpdateTemplateUseCase,
)
from recipe_inventory.infrastructure.storage.sqlite import SQLiteTemplateStore

router = APIRouter(prefix="/api/templates", tags=["templates"])


@router.post(
    "",
    response_model=CreateTemplateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_template(
    request: CreateTemplateRequest,
    use_case: CreateTemplateUseCase = Depends(get_create_template_use_case),
) -> CreateTemplateResponse:
    """
    Create a recipe template.

    A template whose ingredients did not all persist is returned with
    outcome "partial" and the failures listed as warnings.
    """
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.post("/import", response_model=ImportTemplatesResponse)
async def import_templates(
    request: ImportTemplatesRequest,
    use_case: ImportTemplatesUseCase = Depends(get_import_templates_use_case),
) -> ImportTemplatesResponse:
    """Bulk import flat rows, one template per recipe name."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.post(
    "/import/csv",
    response_model=ImportTemplatesResponse,
    responses={400: {"model": ErrorResponse}},
)
async def import_templates_csv(
    file: UploadFile = File(...),
    update_existing: bool = Form(default=False),
    use_case: ImportTemplatesUseCase = Depends(get_import_templates_use_case),
) -> ImportTemplatesResponse:
    """Bulk import from a CSV upload with the same columns as the JSON rows."""
    content = await file.read()
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded") from e

    rows = parse_template_csv(text)
    if not rows:
        raise HTTPException(status_code=400, detail="CSV file contains no template rows")

    result = await use_case.execute(
        ImportTemplatesRequest(rows=rows, update_existing=update_existing)
    )
    return use_case.to_response(result)


@router.get("", response_model=TemplateListResponse)
async def list_templates(
    active_only: bool = True,
    limit: int = 100,
    offset: int = 0,
    store: SQLiteTemplateStore = Depends(get_tmpl_store),
) -> TemplateListResponse:
    templates = await store.list_templates(active_only=active_only, limit=limit, offset=offset)
    return TemplateListResponse(
        templates=[template_to_response(t) for t in templates],
        total=len(templates),
    )


@router.get(
    "/{template_id}",
    response_model=TemplateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_template(
    template_id: int,
    store: SQLiteTemplateStore = Depends(get_tmpl_store),
) -> TemplateResponse:
    template = await store.get_template(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail=f"Recipe template not found: {template_id}")
    return template_to_response(template)


@router.put(
    "/{template_id}",
    response_model=TemplateResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_template(
    template_id: int,
    request: UpdateTemplateRequest,
    use_case: UpdateTemplateUseCase = Depends(get_update_template_use_case),
) -> TemplateResponse:
    """Replace a template's definition; bumps its version."""
    template = await use_case.execute(template_id, request)
    return template_to_response(template)


@router.post(
    "/{template_id}/deactivate",
    response_model=TemplateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def deactivate_template(
    template_id: int,
    use_case: DeactivateTemplateUseCase = Depends(get_deactivate_template_use_case),
) -> TemplateResponse:
    template = await use_case.execute(template_id)
    return template_to_response(template)


@router.post(
    "/{template_id}/deploy",
    response_model=DeploymentReportResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def deploy_template(
    template_id: int,
    request: DeployTemplateRequest,
    use_case: DeployTemplateUseCase = Depends(get_deploy_template_use_case),
) -> DeploymentReportResponse:
    """Deploy to each store independently; outcomes are reported per store."""
    report = await use_case.execute(template_id, request.store_ids)
    return use_case.to_response(report)
