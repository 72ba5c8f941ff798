"""Google Gemini multimodal provider."""
import requests
import structlog

from .base import (
    ClassificationError,
    ClassificationResult,
    Credential,
    NoModelsAvailableError,
    ProviderAdapter,
    ProviderHTTPError,
    ProviderId,
    mask_secret,
)
from .discovery import GEMINI_API_BASE, PREFERRED_GEMINI_MODELS, select_gemini_model
from .http import encode_image, mime_type_for, post_json
from .prompting import CLASSIFICATION_PROMPT, parse_tagged_response

logger = structlog.get_logger()

GEMINI_STATUS_MESSAGES = {500: "Internal Google Server Error."}


def extract_candidate_text(data: dict) -> str | None:
    """Pull the first text part out of a generateContent response."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


class GeminiAdapter(ProviderAdapter):
    """Gemini generateContent with discovered-model-first fallback."""

    provider_id = ProviderId.GOOGLE_GEMINI
    display_name = "Google Gemini API"

    def __init__(self, session: requests.Session, timeout: float):
        self.session = session
        self.timeout = timeout

    def candidate_models(self, discovered: str) -> list[str]:
        """Discovered model first, then the remaining preferred ones."""
        return [discovered] + [m for m in PREFERRED_GEMINI_MODELS if m != discovered]

    def _call_model(self, model: str, image_path: str, api_key: str) -> str:
        payload = {
            "contents": [{
                "parts": [
                    {"text": CLASSIFICATION_PROMPT},
                    {
                        "inline_data": {
                            "mime_type": mime_type_for(image_path),
                            "data": encode_image(image_path),
                        }
                    },
                ]
            }]
        }
        data = post_json(
            self.session,
            f"{GEMINI_API_BASE}/models/{model}:generateContent",
            payload,
            provider="Gemini",
            timeout=self.timeout,
            params={"key": api_key},
            model=model,
            overrides=GEMINI_STATUS_MESSAGES,
        )
        text = extract_candidate_text(data)
        if not text:
            raise ClassificationError("No response text from Gemini API.")
        return text

    def classify(self, image_path: str, credential: Credential) -> ClassificationResult:
        logger.info(
            "gemini_analysis_started",
            image_path=image_path,
            key=mask_secret(credential.secret),
        )
        try:
            discovered = select_gemini_model(self.session, credential.secret, self.timeout)
        except NoModelsAvailableError:
            raise
        except (ClassificationError, requests.RequestException) as e:
            logger.error("gemini_discovery_failed", error=str(e))
            return ClassificationResult.failure(self.display_name, str(e))

        last_error: Exception | None = None
        for model in self.candidate_models(discovered):
            logger.info("gemini_model_attempt", model=model)
            try:
                text = self._call_model(model, image_path, credential.secret)
            except ProviderHTTPError as e:
                last_error = e
                if e.status == 401:
                    break
                continue
            except (ClassificationError, requests.RequestException, OSError) as e:
                last_error = e
                continue

            logger.debug("gemini_response", model=model, response=text[:200])
            parsed = parse_tagged_response(text)
            return ClassificationResult(
                category=parsed.category,
                confidence=parsed.confidence,
                reasoning=f"{parsed.reasoning} (Model: {model})",
                provider=f"{self.display_name} ({model})",
            )

        logger.error("gemini_all_models_failed", error=str(last_error))
        return ClassificationResult.failure(self.display_name, str(last_error))
