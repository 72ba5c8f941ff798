"""Image format and loading utilities.

This module provides shared image utilities used by the upload path and
the on-device classifier. All image format constants should be defined here.
"""
from pathlib import Path

import structlog
from PIL import Image

logger = structlog.get_logger()

# Canonical list of accepted upload formats - use this everywhere
SUPPORTED_FORMATS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tiff", ".tif"}

SUPPORTED_MIME_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/bmp",
    "image/tiff",
}


def is_supported_format(path: str) -> bool:
    """Check if file extension is accepted."""
    return Path(path).suffix.lower() in SUPPORTED_FORMATS


def is_supported_mime_type(mime_type: str | None) -> bool:
    """Check if a declared content type is accepted."""
    return (mime_type or "").split(";")[0].strip().lower() in SUPPORTED_MIME_TYPES


def load_image(path: str, mode: str = "RGB") -> Image.Image:
    """Read an image fully into memory in the given colour mode.

    The file handle is released before returning, so temp uploads can be
    deleted while the image is still in use.

    Raises:
        FileNotFoundError: If the file is missing.
        PIL.UnidentifiedImageError: If the bytes are not a readable image.
    """
    image_path = Path(path)
    if not image_path.is_file():
        raise FileNotFoundError(f"Image not found: {image_path}")

    with Image.open(image_path) as img:
        converted = img.convert(mode) if img.mode != mode else img.copy()

    logger.debug("image_loaded", path=image_path.name, size=converted.size)
    return converted
