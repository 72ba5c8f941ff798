"""Tests for upload validation and temp file handling."""
import os

import pytest

from stock_categorizer.services.upload_service import (
    UploadValidationError,
    temporary_image,
    validate_upload,
)


class TestValidateUpload:
    def test_accepts_supported_image(self):
        validate_upload("holiday.JPG", "image/jpeg", 1024, max_bytes=2048)

    def test_rejects_unknown_extension(self):
        with pytest.raises(UploadValidationError) as exc:
            validate_upload("notes.txt", "text/plain", 10, max_bytes=2048)
        assert exc.value.code == "UNSUPPORTED_FORMAT"

    def test_rejects_missing_filename(self):
        with pytest.raises(UploadValidationError) as exc:
            validate_upload(None, None, 10, max_bytes=2048)
        assert exc.value.code == "UNSUPPORTED_FORMAT"

    def test_rejects_wrong_content_type(self):
        with pytest.raises(UploadValidationError) as exc:
            validate_upload("photo.png", "application/pdf", 10, max_bytes=2048)
        assert exc.value.code == "UNSUPPORTED_FORMAT"

    def test_rejects_oversized(self):
        with pytest.raises(UploadValidationError) as exc:
            validate_upload("photo.png", "image/png", 4096, max_bytes=2048)
        assert exc.value.code == "FILE_TOO_LARGE"


class TestTemporaryImage:
    def test_writes_and_removes(self, tmp_path):
        with temporary_image("photo.PNG", b"data", str(tmp_path)) as path:
            assert path.endswith(".png")
            with open(path, "rb") as f:
                assert f.read() == b"data"
        assert not os.path.exists(path)

    def test_removed_on_error(self, tmp_path):
        with pytest.raises(RuntimeError):
            with temporary_image("photo.jpg", b"data", str(tmp_path)) as path:
                raise RuntimeError("provider exploded")
        assert not os.path.exists(path)
        assert list(tmp_path.iterdir()) == []
