"""Google Cloud Vision label-detection provider."""
import requests
import structlog

from .base import (
    ClassificationError,
    ClassificationResult,
    Credential,
    Label,
    ProviderAdapter,
    ProviderId,
)
from .http import coerce_score, encode_image, json_list, json_object, post_json
from .mapper import map_labels_to_category

logger = structlog.get_logger()

ANNOTATE_URL = "https://vision.googleapis.com/v1/images:annotate"
MAX_LABELS = 20


def labels_from_annotations(data) -> list[Label]:
    """Convert an annotate response into Labels.

    Raises:
        ClassificationError: If the body is not a JSON object.
    """
    responses = json_list(json_object(data, "Google Cloud Vision").get("responses"))
    if not responses:
        return []
    return [
        Label(text=str(a.get("description") or ""), score=coerce_score(a.get("score")))
        for a in json_list(responses[0].get("labelAnnotations"))
    ]


class GoogleVisionAdapter(ProviderAdapter):
    """Cloud Vision LABEL_DETECTION mapped through the keyword table."""

    provider_id = ProviderId.GOOGLE_CLOUD_VISION
    display_name = "Google Cloud Vision"

    def __init__(self, session: requests.Session, timeout: float):
        self.session = session
        self.timeout = timeout

    def classify(self, image_path: str, credential: Credential) -> ClassificationResult:
        try:
            payload = {
                "requests": [{
                    "image": {"content": encode_image(image_path)},
                    "features": [{"type": "LABEL_DETECTION", "maxResults": MAX_LABELS}],
                }]
            }
            data = post_json(
                self.session,
                ANNOTATE_URL,
                payload,
                provider="Google Cloud Vision",
                timeout=self.timeout,
                params={"key": credential.secret},
            )
            labels = labels_from_annotations(data)
            if not labels:
                raise ClassificationError("No labels detected")
        except (ClassificationError, requests.RequestException, OSError) as e:
            logger.error("google_vision_failed", error=str(e))
            return ClassificationResult.failure(self.display_name, str(e))

        mapped = map_labels_to_category(labels)
        return ClassificationResult(
            category=mapped.category,
            confidence=mapped.confidence,
            reasoning=mapped.reasoning,
            provider=self.display_name,
            labels=tuple(label.text for label in labels),
        )
