"""Provider fallback orchestrator for Stock Categorizer."""
import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from .classifiers import AdapterRegistry, ClassificationResult, Credential
from .classifiers.base import mask_secret

logger = structlog.get_logger()


class NoUsableCredentialsError(Exception):
    """Every supplied credential was blank or disabled."""


class AllProvidersFailedError(Exception):
    """Every usable credential was tried and none produced a result."""

    def __init__(self, last_error: str):
        super().__init__(f"All API keys failed. Last error: {last_error}")
        self.last_error = last_error


@dataclass(frozen=True)
class CategorizedImage:
    """ClassificationResult as returned to the caller."""
    filename: str
    category: str
    confidence: float
    reasoning: str
    provider: str
    labels: tuple[str, ...] = ()
    suggestions: list[str] = field(default_factory=list)

    @classmethod
    def from_result(cls, filename: str, result: ClassificationResult) -> "CategorizedImage":
        return cls(
            filename=Path(filename).name,
            category=result.category,
            confidence=result.confidence,
            reasoning=result.reasoning,
            provider=result.provider,
            labels=result.labels,
        )


@dataclass(frozen=True)
class Attempt:
    """Accumulator carried across the credential sequence."""
    result: ClassificationResult | None = None
    last_error: str | None = None
    tried: int = 0

    def succeeded(self, result: ClassificationResult) -> "Attempt":
        return Attempt(result=result, last_error=self.last_error, tried=self.tried + 1)

    def failed(self, error: str) -> "Attempt":
        return Attempt(result=None, last_error=error, tried=self.tried + 1)


@dataclass
class BatchItem:
    filename: str
    image: CategorizedImage | None = None
    error: str | None = None


@dataclass
class BatchSummary:
    items: list[BatchItem] = field(default_factory=list)
    processed: int = 0
    errors: int = 0


class CategorizationOrchestrator:
    """Walks the caller's credentials in order; first success wins.

    Providers are billed and rate-limited, so each attempt is fully awaited
    before the next one starts.
    """

    def __init__(self, registry: AdapterRegistry):
        self.registry = registry

    async def _attempt(self, image_path: str, credential: Credential) -> ClassificationResult:
        adapter = self.registry.get(credential.provider)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, adapter.classify, image_path, credential)

    async def classify_image(
        self,
        image_path: str,
        credentials: Sequence[Credential],
        filename: str | None = None,
    ) -> CategorizedImage:
        """Categorize one image using the first provider that succeeds.

        ``filename`` names the result when the image lives in a temp file.

        Raises:
            NoUsableCredentialsError: If no credential has a secret.
            AllProvidersFailedError: If every usable credential failed.
        """
        state = Attempt()

        for credential in credentials:
            if not credential.is_usable:
                continue

            logger.info(
                "provider_attempt",
                provider=credential.provider.value,
                key=mask_secret(credential.secret),
            )
            try:
                result = await self._attempt(image_path, credential)
            except Exception as e:
                logger.error("provider_raised", provider=credential.provider.value, error=str(e))
                state = state.failed(str(e))
                continue

            if result.failed:
                logger.warning(
                    "provider_failed",
                    provider=credential.provider.value,
                    reason=result.reasoning,
                )
                state = state.failed(result.reasoning)
                continue

            state = state.succeeded(result)
            break

        if state.result is not None:
            logger.info(
                "image_categorized",
                filename=Path(filename or image_path).name,
                category=state.result.category,
                provider=state.result.provider,
                attempts=state.tried,
            )
            return CategorizedImage.from_result(filename or image_path, state.result)

        if state.last_error is not None:
            raise AllProvidersFailedError(state.last_error)
        raise NoUsableCredentialsError("No valid API keys provided or supported.")

    async def classify_batch(
        self,
        image_paths: Sequence[str],
        credentials: Sequence[Credential],
        filenames: Sequence[str] | None = None,
    ) -> BatchSummary:
        """Categorize images one at a time, in order.

        Every image yields an item; failures carry the error message.
        """
        summary = BatchSummary()
        names = list(filenames) if filenames is not None else [Path(p).name for p in image_paths]

        for image_path, filename in zip(image_paths, names):
            try:
                image = await self.classify_image(image_path, credentials, filename=filename)
            except (NoUsableCredentialsError, AllProvidersFailedError) as e:
                summary.items.append(BatchItem(filename=filename, error=str(e)))
                summary.errors += 1
                continue

            summary.items.append(BatchItem(filename=filename, image=image))
            summary.processed += 1

        logger.info("batch_complete", processed=summary.processed, errors=summary.errors)
        return summary
