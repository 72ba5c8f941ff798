"""Azure Computer Vision tagging provider.

The secret is ``"<resource-name>:<subscription-key>"``; the resource name
selects the regional endpoint.
"""
from pathlib import Path

import requests
import structlog

from .base import (
    ClassificationError,
    ClassificationResult,
    Credential,
    CredentialFormatError,
    Label,
    ProviderAdapter,
    ProviderId,
)
from .http import coerce_score, json_list, json_object, raise_for_status
from .mapper import map_labels_to_category

logger = structlog.get_logger()

ENDPOINT_TEMPLATE = "https://{resource}.cognitiveservices.azure.com/vision/v3.2/analyze"


def split_azure_secret(secret: str) -> tuple[str, str]:
    """Split ``resource:key``.

    Raises:
        CredentialFormatError: If either part is missing.
    """
    resource, sep, key = secret.strip().partition(":")
    if not sep or not resource.strip() or not key.strip():
        raise CredentialFormatError(
            "Azure credential must be formatted as '<resource-name>:<key>'."
        )
    return resource.strip(), key.strip()


class AzureVisionAdapter(ProviderAdapter):
    """Azure image tags mapped through the keyword table."""

    provider_id = ProviderId.AZURE_COMPUTER_VISION
    display_name = "Azure Computer Vision"

    def __init__(self, session: requests.Session, timeout: float):
        self.session = session
        self.timeout = timeout

    def classify(self, image_path: str, credential: Credential) -> ClassificationResult:
        # Malformed secrets propagate: no other model would help.
        resource, key = split_azure_secret(credential.secret)

        try:
            response = self.session.post(
                ENDPOINT_TEMPLATE.format(resource=resource),
                params={"visualFeatures": "Tags"},
                headers={
                    "Ocp-Apim-Subscription-Key": key,
                    "Content-Type": "application/octet-stream",
                },
                data=Path(image_path).read_bytes(),
                timeout=self.timeout,
            )
            raise_for_status(response, "Azure Computer Vision")
            data = json_object(response.json(), "Azure Computer Vision")
            labels = [
                Label(text=str(t.get("name") or ""), score=coerce_score(t.get("confidence")))
                for t in json_list(data.get("tags"))
            ]
            if not labels:
                raise ClassificationError("No tags detected")
        except (ClassificationError, requests.RequestException, OSError) as e:
            logger.error("azure_vision_failed", error=str(e))
            return ClassificationResult.failure(self.display_name, str(e))

        mapped = map_labels_to_category(labels)
        return ClassificationResult(
            category=mapped.category,
            confidence=mapped.confidence,
            reasoning=mapped.reasoning,
            provider=self.display_name,
            labels=tuple(label.text for label in labels),
        )
