"""On-device provider: no network, no credential."""
import structlog

from .base import (
    ClassificationResult,
    Credential,
    Label,
    ProviderAdapter,
    ProviderId,
)
from .cascade import classify_predictions
from .mapper import map_labels_to_category

logger = structlog.get_logger()

STRATEGIES = ("cascade", "mapper")


class LocalDeviceAdapter(ProviderAdapter):
    """Runs the local image classifier and applies a rule strategy.

    ``cascade`` (default) uses the keyword-group priority cascade;
    ``mapper`` feeds the predictions through the shared label mapper.
    """

    provider_id = ProviderId.LOCAL_DEVICE
    display_name = "Local Device (transformers)"

    def __init__(self, model_handle, strategy: str = "cascade"):
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown local rule strategy: {strategy}")
        self.model_handle = model_handle
        self.strategy = strategy

    def classify(self, image_path: str, credential: Credential | None = None) -> ClassificationResult:
        try:
            predictions = self.model_handle.predict(image_path)
        except Exception as e:
            logger.error("local_classification_failed", error=str(e))
            return ClassificationResult.failure(self.display_name, str(e))

        logger.debug("local_predictions", predictions=[p.label for p in predictions])
        labels = tuple(p.label for p in predictions)

        if self.strategy == "mapper" and predictions:
            mapped = map_labels_to_category(
                Label(text=p.label, score=p.probability) for p in predictions
            )
            return ClassificationResult(
                category=mapped.category,
                confidence=mapped.confidence,
                reasoning=mapped.reasoning,
                provider=self.display_name,
                labels=labels,
            )

        result = classify_predictions(predictions)
        return ClassificationResult(
            category=result.category,
            confidence=result.confidence,
            reasoning=result.reasoning,
            provider=self.display_name,
            labels=labels,
        )
