"""Adobe Stock category taxonomy and keyword tables.

The category names are sent verbatim to generative providers and compared
case-sensitively on the way back, so they must not be reworded.
"""

CATEGORIES: tuple[str, ...] = (
    "Animals",
    "Buildings and Architecture",
    "Business",
    "Drinks",
    "The Environment",
    "States of Mind",
    "Food",
    "Graphic Resources",
    "Hobbies and Leisure",
    "Industry",
    "Landscapes",
    "Lifestyle",
    "People",
    "Plants and Flowers",
    "Culture and Religion",
    "Science",
    "Social Issues",
    "Sports",
    "Technology",
    "Transport",
    "Travel",
)

DEFAULT_CATEGORY = "Graphic Resources"
UNABLE_TO_CATEGORIZE = "Unable to categorize"

# Substring keywords used by the label mapper. Iterated in CATEGORIES order.
CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Animals": (
        "animal", "mammal", "bird", "fish", "insect", "pet", "dog", "cat",
        "wildlife", "zoo", "fur", "beak", "wing",
    ),
    "Buildings and Architecture": (
        "building", "architecture", "house", "skyscraper", "city", "urban",
        "construction", "structure", "window", "door", "roof", "facade",
    ),
    "Business": (
        "business", "office", "work", "meeting", "computer", "laptop",
        "finance", "money", "chart", "graph", "corporate", "professional",
        "suit",
    ),
    "Drinks": (
        "drink", "beverage", "glass", "bottle", "cup", "mug", "coffee", "tea",
        "water", "alcohol", "wine", "beer", "cocktail", "juice",
    ),
    "The Environment": (
        "environment", "nature", "ecology", "pollution", "recycle", "green",
        "earth", "planet", "climate", "global warming", "forest", "ocean",
    ),
    "States of Mind": (
        "emotion", "happy", "sad", "angry", "love", "fear", "surprise", "joy",
        "depression", "stress", "mental", "thought", "dream",
    ),
    "Food": (
        "food", "meal", "dish", "cuisine", "fruit", "vegetable", "meat",
        "bread", "dessert", "snack", "cooking", "kitchen", "restaurant",
    ),
    "Graphic Resources": (
        "graphic", "design", "background", "texture", "pattern", "abstract",
        "art", "illustration", "vector", "symbol", "icon", "logo", "jewelry",
        "diamond", "gemstone", "luxury",
    ),
    "Hobbies and Leisure": (
        "hobby", "leisure", "fun", "game", "play", "toy", "music", "art",
        "craft", "reading", "writing", "collection", "relax",
    ),
    "Industry": (
        "industry", "factory", "manufacturing", "machine", "tool", "worker",
        "engineer", "construction", "plant", "production", "technology",
    ),
    "Landscapes": (
        "landscape", "nature", "scenery", "mountain", "sky", "cloud", "river",
        "lake", "sea", "ocean", "beach", "forest", "tree", "grass", "field",
        "sunset", "sunrise",
    ),
    "Lifestyle": (
        "lifestyle", "living", "home", "family", "friend", "couple", "party",
        "celebration", "wedding", "holiday", "vacation", "travel",
    ),
    "People": (
        "person", "people", "man", "woman", "child", "baby", "crowd", "face",
        "portrait", "human", "group", "team",
    ),
    "Plants and Flowers": (
        "plant", "flower", "leaf", "garden", "flora", "botany", "bloom",
        "blossom", "tree", "grass", "nature",
    ),
    "Culture and Religion": (
        "culture", "religion", "tradition", "festival", "temple", "church",
        "mosque", "prayer", "god", "spirituality", "belief", "custom",
    ),
    "Science": (
        "science", "research", "lab", "laboratory", "microscope", "chemistry",
        "biology", "physics", "medicine", "health", "doctor", "hospital",
    ),
    "Social Issues": (
        "social", "issue", "poverty", "war", "protest", "politics",
        "government", "law", "justice", "crime", "violence", "peace",
    ),
    "Sports": (
        "sport", "game", "match", "player", "team", "ball", "stadium",
        "athlete", "exercise", "fitness", "gym", "workout", "running",
    ),
    "Technology": (
        "technology", "tech", "computer", "phone", "mobile", "internet",
        "digital", "software", "hardware", "robot", "ai", "future",
    ),
    "Transport": (
        "transport", "transportation", "vehicle", "car", "bus", "train",
        "plane", "ship", "boat", "bicycle", "road", "traffic", "travel",
    ),
    "Travel": (
        "travel", "tourism", "tourist", "destination", "vacation", "holiday",
        "trip", "journey", "adventure", "explore", "landmark", "monument",
    ),
}

_BY_LOWER = {name.lower(): name for name in CATEGORIES}


def is_category(name: str) -> bool:
    """Exact, case-sensitive membership test."""
    return name in CATEGORIES


def normalize_category(name: str) -> str:
    """Map a provider-supplied category name onto the canonical spelling.

    Exact matches pass through, case-insensitive matches are re-cased, and
    anything else becomes UNABLE_TO_CATEGORIZE.
    """
    if not isinstance(name, str):
        return UNABLE_TO_CATEGORIZE
    if is_category(name):
        return name
    return _BY_LOWER.get(name.strip().lower(), UNABLE_TO_CATEGORIZE)
