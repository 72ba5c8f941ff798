"""API route definitions.

All endpoints return consistent APIResponse[T] structure with error codes.
"""
from contextlib import ExitStack

import structlog
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import TypeAdapter, ValidationError

from ..classifiers import CATEGORIES, Credential, ProviderId
from ..config import MAX_UPLOAD_BYTES, UPLOAD_TMP_DIR
from ..orchestrator import (
    AllProvidersFailedError,
    CategorizationOrchestrator,
    NoUsableCredentialsError,
)
from ..services.upload_service import (
    UploadValidationError,
    temporary_image,
    validate_upload,
)
from .schemas import (
    APIResponse,
    ApiKeyIn,
    BatchData,
    BatchItemData,
    BatchResponse,
    CategoriesData,
    CategoriesResponse,
    CategorizeResponse,
    ErrorCode,
    HealthResponse,
    image_to_data,
)

logger = structlog.get_logger()
router = APIRouter()

_api_keys_adapter = TypeAdapter(list[ApiKeyIn])


def get_orchestrator(request: Request) -> CategorizationOrchestrator:
    """Get the orchestrator from app state."""
    return request.app.state.orchestrator


def parse_api_keys(raw: str) -> list[Credential]:
    """Decode the ``apiKeys`` form field into credentials, order preserved."""
    keys = _api_keys_adapter.validate_json(raw or "[]")
    return [k.to_credential() for k in keys]


# =============================================================================
# Health Check
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Check if the API is running and whether the local model is loaded."""
    handle = getattr(request.app.state, "model_handle", None)
    return APIResponse.ok(
        data={
            "status": "healthy",
            "local_model_loaded": bool(handle and handle.is_loaded),
            "version": "0.1.0",
        }
    )


@router.get("/categories", response_model=CategoriesResponse)
async def list_categories():
    """List the category taxonomy and the supported providers."""
    return APIResponse.ok(
        data=CategoriesData(
            categories=list(CATEGORIES),
            providers=[p.value for p in ProviderId],
        ),
        total=len(CATEGORIES),
    )


# =============================================================================
# Categorization
# =============================================================================

@router.post("/categorize", response_model=CategorizeResponse)
async def categorize(
    image: UploadFile | None = File(None),
    apiKeys: str = Form("[]"),  # noqa: N803 - field name used by the UI
    orchestrator: CategorizationOrchestrator = Depends(get_orchestrator),
):
    """Categorize a single uploaded image.

    ``apiKeys`` is a JSON list of ``{"provider", "key"}`` objects, tried in order.
    """
    if image is None:
        return APIResponse.fail("No image file uploaded", ErrorCode.NO_IMAGE)

    try:
        credentials = parse_api_keys(apiKeys)
    except ValidationError as e:
        return APIResponse.fail(f"Invalid apiKeys: {e}", ErrorCode.VALIDATION_ERROR)

    logger.info("categorize_request", filename=image.filename, key_count=len(credentials))

    content = await image.read()
    try:
        validate_upload(image.filename, image.content_type, len(content), MAX_UPLOAD_BYTES)
    except UploadValidationError as e:
        return APIResponse.fail(str(e), ErrorCode(e.code))

    try:
        with temporary_image(image.filename, content, UPLOAD_TMP_DIR) as tmp_path:
            result = await orchestrator.classify_image(
                tmp_path, credentials, filename=image.filename
            )
    except NoUsableCredentialsError as e:
        return APIResponse.fail(str(e), ErrorCode.NO_CREDENTIALS)
    except AllProvidersFailedError as e:
        logger.error("categorize_failed", filename=image.filename, error=str(e))
        return APIResponse.fail(
            f"Failed to categorize image: {e}", ErrorCode.ALL_PROVIDERS_FAILED
        )

    return APIResponse.ok(data=image_to_data(result))


@router.post("/categorize/batch", response_model=BatchResponse)
async def categorize_batch(
    images: list[UploadFile] = File(...),
    apiKeys: str = Form("[]"),  # noqa: N803
    orchestrator: CategorizationOrchestrator = Depends(get_orchestrator),
):
    """Categorize several images, one at a time, in upload order.

    Rejected or failed images get an error entry instead of being dropped.
    """
    try:
        credentials = parse_api_keys(apiKeys)
    except ValidationError as e:
        return APIResponse.fail(f"Invalid apiKeys: {e}", ErrorCode.VALIDATION_ERROR)

    if not any(c.is_usable for c in credentials):
        return APIResponse.fail(
            "No valid API keys provided or supported.", ErrorCode.NO_CREDENTIALS
        )

    slots: list[BatchItemData | None] = []
    accepted: list[tuple[int, str, str]] = []

    with ExitStack() as stack:
        for image in images:
            content = await image.read()
            filename = image.filename or "unknown"
            try:
                validate_upload(filename, image.content_type, len(content), MAX_UPLOAD_BYTES)
            except UploadValidationError as e:
                slots.append(BatchItemData(filename=filename, error=str(e)))
                continue
            tmp_path = stack.enter_context(temporary_image(filename, content, UPLOAD_TMP_DIR))
            accepted.append((len(slots), tmp_path, filename))
            slots.append(None)

        summary = await orchestrator.classify_batch(
            [path for _, path, _ in accepted],
            credentials,
            filenames=[name for _, _, name in accepted],
        )

    for (index, _, _), item in zip(accepted, summary.items):
        slots[index] = BatchItemData(
            filename=item.filename,
            result=image_to_data(item.image) if item.image else None,
            error=item.error,
        )

    items = [slot for slot in slots if slot is not None]
    errors = sum(1 for item in items if item.error)
    return APIResponse.ok(
        data=BatchData(items=items, processed=summary.processed, errors=errors),
        total=len(items),
    )
