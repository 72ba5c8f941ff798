"""Gemini model discovery.

Lists the models a key can use and picks the best vision-capable one.
"""
import requests
import structlog

from .base import NoModelsAvailableError
from .http import json_list, json_object, raise_for_status

logger = structlog.get_logger()

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

# Most preferred first
PREFERRED_GEMINI_MODELS = (
    "gemini-1.5-flash-latest",
    "gemini-1.5-flash",
    "gemini-1.5-pro-latest",
    "gemini-1.5-pro",
    "gemini-pro-vision",
)

SECONDARY_KEYWORDS = ("vision", "flash", "pro")


def short_name(model_name: str) -> str:
    """``models/gemini-1.5-flash`` -> ``gemini-1.5-flash``."""
    return model_name.rsplit("/", 1)[-1]


def choose_model(model_names: list[str]) -> str:
    """Select a model from the names returned by the models index.

    Raises:
        NoModelsAvailableError: If the list is empty.
    """
    if not model_names:
        raise NoModelsAvailableError("No models available for this API key.")

    for preferred in PREFERRED_GEMINI_MODELS:
        for name in model_names:
            if name == preferred or short_name(name) == preferred:
                return preferred

    for name in model_names:
        if any(keyword in name for keyword in SECONDARY_KEYWORDS):
            return short_name(name)

    return short_name(model_names[0])


def list_gemini_models(session: requests.Session, api_key: str, timeout: float) -> list[str]:
    """Return the model names visible to ``api_key``."""
    response = session.get(
        f"{GEMINI_API_BASE}/models",
        params={"key": api_key},
        timeout=timeout,
    )
    raise_for_status(response, "Gemini")
    data = json_object(response.json(), "Gemini")
    return [
        m["name"] for m in json_list(data.get("models"))
        if isinstance(m.get("name"), str) and m["name"]
    ]


def select_gemini_model(session: requests.Session, api_key: str, timeout: float) -> str:
    """Query the models index and pick the best available vision model."""
    names = list_gemini_models(session, api_key, timeout)
    logger.info("gemini_models_listed", count=len(names))
    model = choose_model(names)
    logger.info("gemini_model_selected", model=model)
    return model
