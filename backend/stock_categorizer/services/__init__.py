"""Service layer: on-device model ownership and upload handling."""
from .model_service import LocalModelHandle
from .upload_service import UploadValidationError, temporary_image, validate_upload

__all__ = [
    "LocalModelHandle",
    "UploadValidationError",
    "temporary_image",
    "validate_upload",
]
