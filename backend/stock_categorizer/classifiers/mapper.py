"""Map detected labels onto the stock category taxonomy.

Used by every provider that returns discrete tags instead of a category:
each label's score is added to every category with a keyword contained in
the label text, and the best-scoring category wins.
"""
from collections.abc import Iterable
from dataclasses import dataclass

from .base import Label
from .taxonomy import CATEGORIES, CATEGORY_KEYWORDS, DEFAULT_CATEGORY

MAX_EXPLAINED_KEYWORDS = 5
MAX_EXPLAINED_LABELS = 5


@dataclass(frozen=True)
class MappedCategory:
    category: str
    confidence: float
    reasoning: str


def heuristic_confidence(max_score: float) -> float:
    """Conservative confidence for a keyword score.

    This is not a calibrated probability: any match starts at 0.7 and grows
    by a tenth of the summed label scores, capped at 0.99.
    """
    if max_score > 0:
        return min(0.7 + max_score * 0.1, 0.99)
    return 0.5


def map_labels_to_category(labels: Iterable[Label]) -> MappedCategory:
    """Pick the category whose keywords best explain the labels."""
    labels = list(labels)
    scores = {category: 0.0 for category in CATEGORIES}
    matched: dict[str, list[str]] = {category: [] for category in CATEGORIES}

    for label in labels:
        name = label.text.lower()
        for category in CATEGORIES:
            keyword = next((k for k in CATEGORY_KEYWORDS[category] if k in name), None)
            if keyword is None:
                continue
            scores[category] += label.score
            if keyword not in matched[category]:
                matched[category].append(keyword)

    best_category = DEFAULT_CATEGORY
    max_score = 0.0
    for category in CATEGORIES:
        if scores[category] > max_score:
            max_score = scores[category]
            best_category = category

    top_labels = ", ".join(f'"{label.text}"' for label in labels[:MAX_EXPLAINED_LABELS])
    if max_score > 0:
        keywords = ", ".join(matched[best_category][:MAX_EXPLAINED_KEYWORDS])
        reasoning = (
            f"The AI detected labels: {top_labels}. It matched keywords "
            f'"{keywords}" which align with the "{best_category}" category.'
        )
    else:
        reasoning = (
            f"The AI detected labels: {top_labels}, but found no strong direct "
            f'matches with specific category keywords. Defaulting to "{best_category}" '
            "based on general visual characteristics."
        )

    return MappedCategory(
        category=best_category,
        confidence=heuristic_confidence(max_score),
        reasoning=reasoning,
    )
