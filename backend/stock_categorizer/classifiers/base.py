"""Base classes for classification providers"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from .taxonomy import UNABLE_TO_CATEGORIZE


class ProviderId(str, Enum):
    LOCAL_DEVICE = "Local Device"
    GOOGLE_CLOUD_VISION = "Google Cloud Vision"
    GOOGLE_GEMINI = "Google Gemini API"
    OPENROUTER = "OpenRouter"
    AZURE_COMPUTER_VISION = "Azure Computer Vision"
    HUGGING_FACE = "Hugging Face"


class ClassificationError(Exception):
    """Base error for provider classification failures."""


class ProviderHTTPError(ClassificationError):
    """A provider answered with a non-success HTTP status."""

    def __init__(self, message: str, status: int | None = None, body=None):
        super().__init__(message)
        self.status = status
        self.body = body


class CredentialFormatError(ClassificationError):
    """A compound secret could not be split into its parts."""


class NoModelsAvailableError(ClassificationError):
    """The provider listed no models for this credential."""


@dataclass(frozen=True)
class Credential:
    """Caller-supplied provider identity plus secret."""
    provider: ProviderId
    secret: str
    enabled: bool = True

    @property
    def is_usable(self) -> bool:
        return self.enabled and bool(self.secret and self.secret.strip())


@dataclass(frozen=True)
class Label:
    """A tag produced by a label-detection provider."""
    text: str
    score: float


@dataclass(frozen=True)
class ClassificationResult:
    """Result from image classification."""
    category: str
    confidence: float
    reasoning: str
    provider: str
    labels: tuple[str, ...] = field(default_factory=tuple)
    failed: bool = False

    def __post_init__(self):
        object.__setattr__(self, "confidence", min(max(float(self.confidence), 0.0), 1.0))

    @classmethod
    def failure(cls, provider: str, reason: str) -> "ClassificationResult":
        """Build the result returned when a provider could not categorize."""
        return cls(
            category=UNABLE_TO_CATEGORIZE,
            confidence=0.0,
            reasoning=f"Analysis failed: {reason}",
            provider=f"{provider} (Failed)",
            failed=True,
        )


class ProviderAdapter(ABC):
    """Abstract interface for classification providers.

    Implement this to add new providers. The orchestrator doesn't
    care which service is used, only that it returns ClassificationResult.
    Ordinary provider failures come back as ``ClassificationResult.failure``;
    only CredentialFormatError and NoModelsAvailableError are raised.
    """

    provider_id: ProviderId
    display_name: str = "base"

    @abstractmethod
    def classify(self, image_path: str, credential: Credential) -> ClassificationResult:
        """Classify a single image."""
        pass


def mask_secret(secret: str) -> str:
    """Shorten a secret for logging."""
    if len(secret) <= 9:
        return "***"
    return f"{secret[:5]}...{secret[-4:]}"
