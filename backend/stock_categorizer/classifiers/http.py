"""Request construction helpers shared by the network providers."""
import base64
import json
import re
from pathlib import Path

import requests
import structlog

from .base import ClassificationError, ProviderHTTPError

logger = structlog.get_logger()

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".heif": "image/heif",
}
DEFAULT_MIME_TYPE = "image/jpeg"

_DATA_URI_PREFIX = re.compile(r"^data:image/\w+;base64,")

# Generic status explanations; providers may override individual codes.
STATUS_MESSAGES = {
    400: "Invalid request or image format.",
    401: "Invalid API Key.",
    402: "Payment required for this model.",
    403: "Permission denied (check API key scope).",
    404: "Model '{model}' not found.",
    429: "Quota exceeded (Rate limit reached).",
    500: "Internal server error.",
    503: "Service unavailable (model may be loading).",
}


def mime_type_for(image_path: str) -> str:
    """Derive the MIME type from the file extension."""
    return MIME_TYPES.get(Path(image_path).suffix.lower(), DEFAULT_MIME_TYPE)


def strip_data_uri(content: str) -> str:
    """Remove a leading ``data:image/...;base64,`` prefix if present."""
    return _DATA_URI_PREFIX.sub("", content, count=1)


def encode_image(image_path: str) -> str:
    """Read an image and return clean base64 text."""
    content = base64.b64encode(Path(image_path).read_bytes()).decode("ascii")
    return strip_data_uri(content)


def json_object(data, provider: str) -> dict:
    """Return ``data`` if it is a JSON object, else raise ClassificationError."""
    if not isinstance(data, dict):
        raise ClassificationError(f"Unexpected {provider} response: {type(data).__name__}")
    return data


def json_list(value) -> list[dict]:
    """The dict entries of ``value``, or nothing when it is not a list."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def coerce_score(value) -> float:
    """Numeric score from a provider field; null or junk counts as 0."""
    try:
        return float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0


def explain_http_error(
    provider: str,
    status: int,
    body=None,
    model: str | None = None,
    overrides: dict[int, str] | None = None,
) -> str:
    """Build a human-readable message for a failed provider call."""
    messages = {**STATUS_MESSAGES, **(overrides or {})}
    template = messages.get(status)
    if template is None:
        detail = json.dumps(body) if body is not None else "Unknown error."
    else:
        detail = template.format(model=model or "unknown")
    return f"{provider} API Error ({status}): {detail}"


def _response_body(response: requests.Response):
    try:
        return response.json()
    except ValueError:
        return response.text[:500]


def raise_for_status(
    response: requests.Response,
    provider: str,
    model: str | None = None,
    overrides: dict[int, str] | None = None,
) -> None:
    """Raise ProviderHTTPError with an explained message on non-2xx."""
    if response.ok:
        return
    body = _response_body(response)
    message = explain_http_error(
        provider, response.status_code, body=body, model=model, overrides=overrides
    )
    logger.warning(
        "provider_http_error",
        provider=provider,
        status=response.status_code,
        model=model,
    )
    raise ProviderHTTPError(message, status=response.status_code, body=body)


def post_json(
    session: requests.Session,
    url: str,
    payload: dict,
    provider: str,
    timeout: float,
    headers: dict | None = None,
    params: dict | None = None,
    model: str | None = None,
    overrides: dict[int, str] | None = None,
):
    """POST a JSON body and return the decoded JSON response."""
    response = session.post(url, json=payload, headers=headers, params=params, timeout=timeout)
    raise_for_status(response, provider, model=model, overrides=overrides)
    return response.json()
