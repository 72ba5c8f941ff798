"""Pydantic schemas for API requests and responses.

All API responses follow a consistent structure:
{
    "success": true/false,
    "data": <response-specific data>,
    "error": "error message if failed",
    "meta": {"error_code": "CODE", "timestamp": "..."}
}
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from ..classifiers import Credential, ProviderId
from ..orchestrator import CategorizedImage


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""
    # General errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Upload errors
    NO_IMAGE = "NO_IMAGE"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"

    # Categorization errors
    NO_CREDENTIALS = "NO_CREDENTIALS"
    ALL_PROVIDERS_FAILED = "ALL_PROVIDERS_FAILED"


# =============================================================================
# Response Meta
# =============================================================================

class ResponseMeta(BaseModel):
    """Metadata included in all API responses."""
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    )
    error_code: ErrorCode | None = None
    total: int | None = None


# =============================================================================
# Generic API Response
# =============================================================================

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Generic wrapper for all API responses.

    Usage:
        return APIResponse.ok(MyData(...))
        return APIResponse.fail("Something failed", ErrorCode.INTERNAL_ERROR)
    """
    success: bool
    data: T | None = None
    error: str | None = None
    meta: ResponseMeta = Field(default_factory=ResponseMeta)

    @classmethod
    def ok(cls, data: T, **meta_kwargs) -> "APIResponse[T]":
        """Create a successful response."""
        return cls(
            success=True,
            data=data,
            meta=ResponseMeta(**meta_kwargs)
        )

    @classmethod
    def fail(cls, error: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR) -> "APIResponse[None]":
        """Create an error response."""
        return cls(
            success=False,
            error=error,
            meta=ResponseMeta(error_code=error_code)
        )


# =============================================================================
# Request Models
# =============================================================================

class ApiKeyIn(BaseModel):
    """One entry of the ``apiKeys`` form field, as the UI stores it."""
    provider: ProviderId
    key: str = ""
    enabled: bool = True

    def to_credential(self) -> Credential:
        return Credential(provider=self.provider, secret=self.key, enabled=self.enabled)


# =============================================================================
# Data Models (used in responses)
# =============================================================================

class CategorizationData(BaseModel):
    """Categorization result for a single image."""
    filename: str
    category: str
    confidence: float
    reasoning: str
    provider: str
    labels: list[str] = []
    suggestions: list[str] = []


class BatchItemData(BaseModel):
    filename: str
    result: CategorizationData | None = None
    error: str | None = None


class BatchData(BaseModel):
    """Results for a multi-image request, in upload order."""
    items: list[BatchItemData]
    processed: int
    errors: int


class CategoriesData(BaseModel):
    categories: list[str]
    providers: list[str]


# =============================================================================
# Response Type Aliases (for cleaner route signatures)
# =============================================================================

HealthResponse = APIResponse[dict]
CategorizeResponse = APIResponse[CategorizationData]
BatchResponse = APIResponse[BatchData]
CategoriesResponse = APIResponse[CategoriesData]


# =============================================================================
# Conversion Utilities
# =============================================================================

def image_to_data(image: CategorizedImage) -> CategorizationData:
    """Convert an orchestrator result to its response model."""
    return CategorizationData(
        filename=image.filename,
        category=image.category,
        confidence=image.confidence,
        reasoning=image.reasoning,
        provider=image.provider,
        labels=list(image.labels),
        suggestions=list(image.suggestions),
    )
