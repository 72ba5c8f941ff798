"""Configuration for the Stock Categorizer backend."""
import os

# API settings
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "5000"))

# Outbound provider calls
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "60"))
OPENROUTER_REFERER = os.getenv("OPENROUTER_REFERER", "http://localhost:5173")
OPENROUTER_TITLE = os.getenv("OPENROUTER_TITLE", "Adobe Stock Categorizer")

# On-device classifier
LOCAL_MODEL_NAME = os.getenv("LOCAL_MODEL_NAME", "google/mobilenet_v2_1.0_224")
LOCAL_TOP_K = int(os.getenv("LOCAL_TOP_K", "5"))
# "cascade" (keyword-group priority) or "mapper" (shared label scoring)
LOCAL_RULE_STRATEGY = os.getenv("LOCAL_RULE_STRATEGY", "cascade").lower()

# Uploads
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(100 * 1024 * 1024)))
UPLOAD_TMP_DIR = os.getenv("UPLOAD_TMP_DIR") or None


def get_http_config() -> dict:
    """Get outbound HTTP settings as a dictionary.

    Returns:
        Dict with timeout, openrouter_referer, openrouter_title.
    """
    return {
        "timeout": REQUEST_TIMEOUT_SECONDS,
        "openrouter_referer": OPENROUTER_REFERER,
        "openrouter_title": OPENROUTER_TITLE,
    }


def get_local_model_config() -> dict:
    """Get on-device model settings as a dictionary."""
    return {
        "model_name": LOCAL_MODEL_NAME,
        "top_k": LOCAL_TOP_K,
        "strategy": LOCAL_RULE_STRATEGY,
    }
