"""OpenRouter chat-completions provider using free vision models."""
import requests
import structlog

from .base import (
    ClassificationError,
    ClassificationResult,
    Credential,
    ProviderAdapter,
    ProviderHTTPError,
    ProviderId,
)
from .http import encode_image, mime_type_for, post_json
from .prompting import CLASSIFICATION_PROMPT, parse_tagged_response

logger = structlog.get_logger()

CHAT_COMPLETIONS_URL = "https://openrouter.ai/api/v1/chat/completions"

# Priority order
OPENROUTER_MODELS = (
    "google/gemini-flash-1.5-8b:free",
    "meta-llama/llama-3.2-11b-vision-instruct:free",
    "qwen/qwen-2-vl-7b-instruct:free",
    "google/gemini-2.0-flash-thinking-exp:free",
)

OPENROUTER_STATUS_MESSAGES = {
    401: "Invalid API key. Get a new one from openrouter.ai/keys",
    402: "This model requires credits. Use a :free model instead",
    429: "Daily limit reached (200/day). Wait 24 hours or create another free key",
}


def extract_message_text(data: dict) -> str | None:
    try:
        text = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


class OpenRouterAdapter(ProviderAdapter):
    """Tries each free vision model in order until one answers."""

    provider_id = ProviderId.OPENROUTER
    display_name = "OpenRouter"

    def __init__(
        self,
        session: requests.Session,
        timeout: float,
        referer: str = "http://localhost:5173",
        title: str = "Adobe Stock Categorizer",
        models: tuple[str, ...] = OPENROUTER_MODELS,
    ):
        self.session = session
        self.timeout = timeout
        self.referer = referer
        self.title = title
        self.models = models

    def _call_model(self, model: str, image_uri: str, api_key: str) -> str:
        payload = {
            "model": model,
            "messages": [{
                "role": "user",
                "content": [
                    {"type": "text", "text": CLASSIFICATION_PROMPT},
                    {"type": "image_url", "image_url": {"url": image_uri}},
                ],
            }],
        }
        headers = {
            "Authorization": f"Bearer {api_key}",
            "HTTP-Referer": self.referer,
            "X-Title": self.title,
        }
        data = post_json(
            self.session,
            CHAT_COMPLETIONS_URL,
            payload,
            provider="OpenRouter",
            timeout=self.timeout,
            headers=headers,
            model=model,
            overrides=OPENROUTER_STATUS_MESSAGES,
        )
        text = extract_message_text(data)
        if not text:
            raise ClassificationError(f"No response text from OpenRouter API using {model}.")
        return text

    def classify(self, image_path: str, credential: Credential) -> ClassificationResult:
        try:
            image_uri = f"data:{mime_type_for(image_path)};base64,{encode_image(image_path)}"
        except OSError as e:
            return ClassificationResult.failure("OpenRouter", str(e))

        last_error: Exception | None = None
        for model in self.models:
            logger.info("openrouter_model_attempt", model=model)
            try:
                text = self._call_model(model, image_uri, credential.secret)
            except ProviderHTTPError as e:
                logger.warning("openrouter_model_failed", model=model, error=str(e))
                last_error = e
                if e.status == 401:
                    break
                continue
            except (ClassificationError, requests.RequestException) as e:
                logger.warning("openrouter_model_failed", model=model, error=str(e))
                last_error = e
                continue

            parsed = parse_tagged_response(text)
            return ClassificationResult(
                category=parsed.category,
                confidence=parsed.confidence,
                reasoning=f"{parsed.reasoning} (Model: {model})",
                provider=f"{self.display_name} (Free)",
            )

        logger.error("openrouter_all_models_failed", error=str(last_error))
        message = "All OpenRouter models failed."
        if isinstance(last_error, ProviderHTTPError):
            message = str(last_error)
        elif last_error is not None:
            message = f"{message} {last_error}"
        return ClassificationResult.failure(self.display_name, message)
