"""Upload service for handling image uploads.

Validates uploaded images and stores them in temporary files for the
providers that need a path. Every temp file is removed when its scope
exits.
"""
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog

from ..utils.image import is_supported_format, is_supported_mime_type

logger = structlog.get_logger()


class UploadValidationError(ValueError):
    """Uploaded file was rejected before classification."""

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.code = code


def validate_upload(
    filename: str | None,
    content_type: str | None,
    size: int,
    max_bytes: int,
) -> None:
    """Check extension, MIME type and size of an upload.

    Raises:
        UploadValidationError: With code UNSUPPORTED_FORMAT or FILE_TOO_LARGE.
    """
    if not filename or not is_supported_format(filename):
        ext = Path(filename or "").suffix.lower() or "<none>"
        raise UploadValidationError(f"Unsupported format: {ext}", "UNSUPPORTED_FORMAT")
    if content_type and not is_supported_mime_type(content_type):
        raise UploadValidationError(f"Unsupported content type: {content_type}", "UNSUPPORTED_FORMAT")
    if size > max_bytes:
        raise UploadValidationError(
            f"File too large: {size} bytes (max {max_bytes})", "FILE_TOO_LARGE"
        )


@contextmanager
def temporary_image(
    filename: str,
    content: bytes,
    directory: str | None = None,
) -> Iterator[str]:
    """Write upload bytes to a temp file and yield its path.

    The file keeps the original extension so providers can derive the MIME
    type, and it is deleted on every exit path.
    """
    fd, tmp_path = tempfile.mkstemp(suffix=Path(filename).suffix.lower(), dir=directory)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        yield tmp_path
    finally:
        try:
            Path(tmp_path).unlink(missing_ok=True)
        except OSError as e:
            logger.error("temp_cleanup_failed", path=tmp_path, error=str(e))
