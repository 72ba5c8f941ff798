"""Classification providers for stock image categorization."""
from .base import (
    ClassificationError,
    ClassificationResult,
    Credential,
    CredentialFormatError,
    Label,
    NoModelsAvailableError,
    ProviderAdapter,
    ProviderHTTPError,
    ProviderId,
)
from .mapper import map_labels_to_category
from .registry import AdapterRegistry, build_default_registry
from .taxonomy import CATEGORIES, DEFAULT_CATEGORY, UNABLE_TO_CATEGORIZE

__all__ = [
    "AdapterRegistry",
    "CATEGORIES",
    "ClassificationError",
    "ClassificationResult",
    "Credential",
    "CredentialFormatError",
    "DEFAULT_CATEGORY",
    "Label",
    "NoModelsAvailableError",
    "ProviderAdapter",
    "ProviderHTTPError",
    "ProviderId",
    "UNABLE_TO_CATEGORIZE",
    "build_default_registry",
    "map_labels_to_category",
]
