"""Keyword-group priority cascade for the on-device classifier.

The on-device model emits ImageNet class names, which are too specific for
the substring mapper (``"tabby, tabby cat"``), so it gets its own rules.
Groups are checked in a fixed order and the first one whose keywords
intersect the predicted words wins. Only seven of the 21 categories are
reachable; everything else falls through to Graphic Resources.
"""
import re
from collections.abc import Iterable
from dataclasses import dataclass

from .taxonomy import DEFAULT_CATEGORY

PEOPLE = frozenset({
    "person", "man", "woman", "boy", "girl", "child", "human", "face", "hair",
    "groom", "bride", "scuba diver", "player", "bikini", "maillot", "stole",
    "gown", "wig", "mask", "sunglasses", "suit", "academic gown", "lab coat",
    "uniform", "doctor", "nurse", "police", "soldier", "helmet", "cap", "hat",
})

OFFICE_TECH = frozenset({
    "laptop", "notebook", "computer", "monitor", "screen", "keyboard", "mouse",
    "desk", "office", "briefcase", "binder", "printer", "photocopier",
    "telephone", "phone", "smartphone", "tablet", "calculator", "projector",
})

FOOD = frozenset({
    "food", "vegetable", "fruit", "cucumber", "tomato", "salad", "meal", "dish",
    "cuisine", "cooking", "bread", "cake", "pizza", "burger", "meat", "fish",
    "soup", "coffee", "tea", "chocolate", "ice cream", "plate", "tray",
    "broccoli", "cauliflower", "zucchini", "squash", "pumpkin", "corn",
    "mushroom", "strawberry", "orange", "lemon", "banana", "apple", "grape",
    "pear", "pineapple", "pepper", "onion", "garlic", "potato", "carrot",
    "cabbage", "lettuce", "spinach", "bean", "pea", "nut", "seed", "grain",
    "rice", "pasta", "noodle", "egg", "cheese", "milk", "juice", "wine", "beer",
    "bakery", "dessert", "snack", "breakfast", "lunch", "dinner", "supper",
    "appetizer", "starter", "main", "course", "side", "drink", "beverage",
    "espresso", "latte", "cappuccino", "mocha", "soda", "cola", "water",
    "cocktail", "mocktail", "smoothie", "shake", "lemonade",
})

PLANTS = frozenset({
    "flower", "rose", "plant", "blossom", "bouquet", "petal", "bloom", "floral",
    "tree", "grass", "leaf", "garden", "pot", "vase", "daisy", "tulip",
    "orchid", "sunflower", "lily", "cactus", "palm", "fern", "moss",
    "mushroom", "fungus", "forest", "jungle", "wood", "log", "branch", "root",
    "stem", "bush", "shrub", "herb", "spice", "weed", "vine", "ivy", "clover",
    "bamboo", "reed", "seaweed", "algae", "coral",
})

ANIMALS = frozenset({
    "dog", "cat", "animal", "bird", "pet", "wildlife", "fish", "horse", "sheep",
    "cow", "pig", "chicken", "duck", "goose", "bear", "lion", "tiger",
    "elephant", "zebra", "monkey", "rabbit", "squirrel", "mouse", "rat",
    "hamster", "snake", "lizard", "frog", "turtle", "spider", "insect", "bee",
    "butterfly", "ant", "beetle", "terrier", "retriever", "hound", "spaniel",
    "corgi", "poodle", "husky", "shepherd", "beagle", "boxer", "bulldog",
    "dalmatian", "pug", "collie", "chihuahua", "wolf", "fox", "deer", "moose",
    "elk", "camel", "giraffe", "rhino", "hippo", "kangaroo", "koala", "panda",
    "whale", "dolphin", "shark", "eagle", "hawk", "parrot", "penguin", "owl",
    "swan", "flamingo", "peacock", "ostrich", "emu", "turkey", "rooster",
    "hen", "chick", "goat", "donkey", "mule", "buffalo", "bison", "yak",
    "llama", "alpaca", "seal", "walrus", "otter", "beaver", "raccoon", "skunk",
    "badger", "mole", "hedgehog", "bat", "crab", "lobster", "shrimp", "snail",
    "slug", "worm", "fly", "mosquito", "wasp", "hornet", "cricket",
    "grasshopper", "locust", "mantis", "dragonfly", "moth", "caterpillar",
    "centipede", "millipede", "scorpion", "tick", "mite", "flea", "louse",
})

LANDSCAPES = frozenset({
    "mountain", "landscape", "sky", "nature", "scenery", "valley", "alp",
    "volcano", "cliff", "coast", "beach", "ocean", "sea", "river", "lake",
    "forest", "park", "sand", "desert", "hill", "plain", "field", "meadow",
    "pasture", "swamp", "marsh", "bog", "wetland", "glacier", "iceberg",
    "canyon", "gorge", "ravine", "cave", "cavern", "waterfall", "stream",
    "creek", "brook", "pond", "pool", "lagoon", "bay", "gulf", "harbor",
    "port", "island", "peninsula", "cape", "headland", "point", "dune", "reef",
    "atoll", "archipelago", "cloud", "sun", "moon", "star", "sunrise",
    "sunset", "twilight", "dawn", "dusk", "night", "day", "weather", "storm",
    "rain", "snow", "wind", "fog", "mist", "haze", "smoke", "fire",
    "lightning", "thunder", "rainbow", "aurora",
})

TECHNOLOGY = frozenset({
    "computer", "phone", "tech", "device", "screen", "monitor", "keyboard",
    "mouse", "laptop", "tablet", "camera", "lens", "radio", "tv", "television",
    "speaker", "headphone", "microphone", "robot", "drone", "satellite",
    "rocket", "space", "science", "lab", "microscope", "telescope",
    "calculator", "clock", "watch", "battery", "charger", "cable", "wire",
    "plug", "socket", "switch", "button", "knob", "dial", "remote",
    "controller", "console", "game", "video", "audio", "internet", "web",
    "app", "software", "code", "data", "server", "cloud", "network", "wifi",
    "bluetooth", "usb", "hdmi", "vga", "dvd", "cd", "disk", "drive", "memory",
    "chip", "processor", "circuit", "board",
})

# After the people/business check, in priority order.
GROUP_ORDER = (
    ("Food", FOOD, "food item"),
    ("Plants and Flowers", PLANTS, "plant/flower"),
    ("Animals", ANIMALS, "animal"),
    ("Landscapes", LANDSCAPES, "landscape element"),
    ("Technology", TECHNOLOGY, "technology"),
)


@dataclass(frozen=True)
class Prediction:
    """One class from the on-device model."""
    label: str
    probability: float


@dataclass(frozen=True)
class CascadeResult:
    category: str
    confidence: float
    reasoning: str


def extract_words(predictions: Iterable[Prediction]) -> set[str]:
    """Lower-case words from every predicted class name."""
    words: set[str] = set()
    for prediction in predictions:
        words.update(w for w in re.split(r"[\s,]+", prediction.label.lower()) if w)
    return words


def classify_predictions(predictions: list[Prediction]) -> CascadeResult:
    """Run the priority cascade over the model's top predictions."""
    if not predictions:
        return CascadeResult(
            category=DEFAULT_CATEGORY,
            confidence=0.0,
            reasoning="No objects detected by local model.",
        )

    words = extract_words(predictions)
    top_class = predictions[0].label
    top_prob = predictions[0].probability

    if words & PEOPLE:
        if words & OFFICE_TECH:
            category = "Business"
            reasoning = f'Detected person ({top_class}) with office/tech elements. Mapped to "Business".'
        else:
            category = "People"
            reasoning = f'Detected person/human element ({top_class}). Mapped to "People".'
        return CascadeResult(category, top_prob, reasoning)

    for category, keywords, description in GROUP_ORDER:
        if words & keywords:
            suffix = " without people" if category == "Technology" else ""
            reasoning = f'Detected {description} ({top_class}){suffix}. Mapped to "{category}".'
            return CascadeResult(category, top_prob, reasoning)

    return CascadeResult(
        category=DEFAULT_CATEGORY,
        confidence=top_prob,
        reasoning=f'No specific category matched for "{top_class}". Defaulting to "{DEFAULT_CATEGORY}".',
    )
