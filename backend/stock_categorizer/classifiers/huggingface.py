"""Hugging Face Inference provider.

Three stages, each tried across the known inference endpoints:

1. Caption the image (several captioning models, first success wins).
2. Zero-shot classify the caption against the 21 categories.
3. If either stage fails, classify the image directly and map the labels.
"""
import requests
import structlog

from .base import (
    ClassificationError,
    ClassificationResult,
    Credential,
    Label,
    ProviderAdapter,
    ProviderHTTPError,
    ProviderId,
)
from .http import coerce_score, encode_image, json_list, post_json
from .mapper import map_labels_to_category
from .taxonomy import CATEGORIES, normalize_category

logger = structlog.get_logger()

HF_ENDPOINTS = (
    "https://api-inference.huggingface.co/models",
    "https://router.huggingface.co/models",
    "https://router.huggingface.co/hf-inference/models",
)

CAPTION_MODELS = (
    "Salesforce/blip-image-captioning-large",
    "Salesforce/blip-image-captioning-base",
    "nlpconnect/vit-gpt2-image-captioning",
)

ZERO_SHOT_MODEL = "facebook/bart-large-mnli"
IMAGE_CLASSIFICATION_MODEL = "google/vit-base-patch16-224"

# Statuses that mean "try another endpoint or model"
RETRYABLE_STATUSES = {404, 410, 429, 500, 502, 503}


def parse_caption(data) -> str | None:
    entries = json_list(data) if isinstance(data, list) else [data]
    first = entries[0] if entries and isinstance(entries[0], dict) else {}
    text = first.get("generated_text")
    return text if isinstance(text, str) and text else None


def parse_zero_shot(data) -> tuple[str, float]:
    """Return the top (label, score) from a zero-shot response.

    Accepts the legacy ``{"labels": [...], "scores": [...]}`` shape and the
    newer list of ``{"label", "score"}`` dicts.

    Raises:
        ClassificationError: If no string label with a score can be found.
    """
    if isinstance(data, dict):
        labels, scores = data.get("labels"), data.get("scores")
        if isinstance(labels, list) and isinstance(scores, list) and labels and scores:
            label, score = labels[0], scores[0]
        else:
            label, score = None, None
    else:
        entries = [d for d in json_list(data) if isinstance(d.get("label"), str)]
        best = max(entries, key=lambda d: coerce_score(d.get("score")), default={})
        label, score = best.get("label"), best.get("score")

    if not isinstance(label, str) or score is None:
        raise ClassificationError("Unexpected zero-shot classification response.")
    return label, coerce_score(score)


def parse_image_labels(data) -> list[Label]:
    return [
        Label(text=d["label"], score=coerce_score(d.get("score")))
        for d in json_list(data)
        if isinstance(d.get("label"), str)
    ]


class HuggingFaceAdapter(ProviderAdapter):
    """BLIP caption + BART zero-shot, with a ViT label fallback."""

    provider_id = ProviderId.HUGGING_FACE
    display_name = "Hugging Face"

    def __init__(
        self,
        session: requests.Session,
        timeout: float,
        endpoints: tuple[str, ...] = HF_ENDPOINTS,
        caption_models: tuple[str, ...] = CAPTION_MODELS,
    ):
        self.session = session
        self.timeout = timeout
        self.endpoints = endpoints
        self.caption_models = caption_models

    def _query(self, model: str, payload: dict, api_key: str):
        """POST to ``model`` on each endpoint until one answers.

        A 401 or any non-retryable status is raised at once.
        """
        headers = {"Authorization": f"Bearer {api_key}"}
        last_error: Exception | None = None
        for endpoint in self.endpoints:
            try:
                return post_json(
                    self.session,
                    f"{endpoint}/{model}",
                    payload,
                    provider="Hugging Face",
                    timeout=self.timeout,
                    headers=headers,
                    model=model,
                )
            except ProviderHTTPError as e:
                if e.status not in RETRYABLE_STATUSES:
                    raise
                logger.debug("hf_endpoint_failed", endpoint=endpoint, model=model, status=e.status)
                last_error = e
            except requests.RequestException as e:
                logger.debug("hf_endpoint_failed", endpoint=endpoint, model=model, error=str(e))
                last_error = e
        raise last_error or ClassificationError(f"No endpoint available for {model}")

    def generate_caption(self, image_b64: str, api_key: str) -> str:
        last_error: Exception | None = None
        for model in self.caption_models:
            try:
                caption = parse_caption(self._query(model, {"inputs": image_b64}, api_key))
            except ProviderHTTPError as e:
                if e.status == 401:
                    raise
                last_error = e
                continue
            except (ClassificationError, requests.RequestException) as e:
                last_error = e
                continue
            if caption:
                logger.info("hf_caption_generated", model=model, caption=caption)
                return caption
            last_error = ClassificationError("Failed to generate image description.")
        raise last_error or ClassificationError("Failed to generate image description.")

    def classify_caption(self, caption: str, api_key: str) -> ClassificationResult:
        data = self._query(
            ZERO_SHOT_MODEL,
            {"inputs": caption, "parameters": {"candidate_labels": list(CATEGORIES)}},
            api_key,
        )
        label, score = parse_zero_shot(data)
        category = normalize_category(label)
        logger.info("hf_caption_categorized", category=category, confidence=score)
        return ClassificationResult(
            category=category,
            confidence=score,
            reasoning=(
                f'Image analysis: "{caption}". Matched to category "{category}" '
                f"with {score * 100:.1f}% confidence."
            ),
            provider=f"{self.display_name} (BLIP + BART)",
        )

    def classify_labels(self, image_b64: str, api_key: str) -> ClassificationResult:
        labels = parse_image_labels(
            self._query(IMAGE_CLASSIFICATION_MODEL, {"inputs": image_b64}, api_key)
        )
        if not labels:
            raise ClassificationError("No labels returned by image classifier.")
        mapped = map_labels_to_category(labels)
        return ClassificationResult(
            category=mapped.category,
            confidence=mapped.confidence,
            reasoning=mapped.reasoning,
            provider=f"{self.display_name} (ViT)",
            labels=tuple(label.text for label in labels),
        )

    def classify(self, image_path: str, credential: Credential) -> ClassificationResult:
        api_key = credential.secret
        try:
            image_b64 = encode_image(image_path)
        except OSError as e:
            return ClassificationResult.failure(self.display_name, str(e))

        try:
            caption = self.generate_caption(image_b64, api_key)
            return self.classify_caption(caption, api_key)
        except ProviderHTTPError as e:
            if e.status == 401:
                logger.error("hf_unauthorized", error=str(e))
                return ClassificationResult.failure(self.display_name, str(e))
            logger.warning("hf_caption_path_failed", error=str(e))
        except (ClassificationError, requests.RequestException) as e:
            logger.warning("hf_caption_path_failed", error=str(e))

        try:
            return self.classify_labels(image_b64, api_key)
        except (ClassificationError, requests.RequestException) as e:
            logger.error("hf_all_stages_failed", error=str(e))
            return ClassificationResult.failure(self.display_name, str(e))
