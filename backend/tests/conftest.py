"""Pytest configuration and fixtures"""
from unittest.mock import MagicMock

import pytest
import requests
from PIL import Image


@pytest.fixture
def image_path(tmp_path):
    """A small JPEG on disk."""
    path = tmp_path / "photo.jpg"
    Image.new("RGB", (32, 32), color=(120, 80, 40)).save(path)
    return str(path)


@pytest.fixture
def png_path(tmp_path):
    path = tmp_path / "graphic.png"
    Image.new("RGB", (16, 16), color=(255, 255, 255)).save(path)
    return str(path)


@pytest.fixture
def make_response():
    """Factory for fake ``requests.Response`` objects."""

    def _make(status: int = 200, body=None):
        response = MagicMock(spec=requests.Response)
        response.status_code = status
        response.ok = 200 <= status < 300
        response.json.return_value = body if body is not None else {}
        response.text = str(body)
        return response

    return _make


@pytest.fixture
def session():
    """A mocked HTTP session; set ``post``/``get`` side effects per test."""
    return MagicMock(spec=requests.Session)
