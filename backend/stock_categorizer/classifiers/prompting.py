"""Prompt and response parsing shared by the generative providers."""
import re
from dataclasses import dataclass

from .taxonomy import CATEGORIES, UNABLE_TO_CATEGORIZE, normalize_category

_CATEGORY_LIST = ", ".join(CATEGORIES[:-1]) + f", or {CATEGORIES[-1]}"

CLASSIFICATION_PROMPT = (
    "Analyze this image carefully. Identify all objects, subjects, themes, colors, "
    "and mood. Then categorize it into EXACTLY ONE of these Adobe Stock categories: "
    f"{_CATEGORY_LIST}. Respond in this exact format:\n"
    "CATEGORY: [category name]\n"
    "CONFIDENCE: [0-100]\n"
    "REASON: [detailed explanation of why this category fits, mentioning specific detected elements]"
)

DEFAULT_REASON = "AI could not provide a clear reason."

_CATEGORY_RE = re.compile(r"CATEGORY:[ \t]*(.+)", re.IGNORECASE)
_CONFIDENCE_RE = re.compile(r"CONFIDENCE:\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
_REASON_RE = re.compile(r"REASON:\s*(.+)", re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class ParsedResponse:
    category: str
    confidence: float
    reasoning: str


def parse_tagged_response(text: str) -> ParsedResponse:
    """Extract CATEGORY / CONFIDENCE / REASON from a model reply.

    Missing or unparsable fields degrade to UNABLE_TO_CATEGORIZE, 0.0 and a
    generic reason. The category is re-cased to the canonical spelling or
    replaced by UNABLE_TO_CATEGORIZE when it is not one of the 21 names.
    """
    category_match = _CATEGORY_RE.search(text)
    confidence_match = _CONFIDENCE_RE.search(text)
    reason_match = _REASON_RE.search(text)

    raw_category = category_match.group(1).strip() if category_match else UNABLE_TO_CATEGORIZE
    confidence = float(confidence_match.group(1)) / 100 if confidence_match else 0.0
    reasoning = reason_match.group(1).strip() if reason_match else DEFAULT_REASON

    return ParsedResponse(
        category=normalize_category(raw_category),
        confidence=min(max(confidence, 0.0), 1.0),
        reasoning=reasoning,
    )
