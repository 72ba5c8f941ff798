"""Tests for Gemini model discovery."""
import pytest

from stock_categorizer.classifiers.base import (
    ClassificationError,
    NoModelsAvailableError,
    ProviderHTTPError,
)
from stock_categorizer.classifiers.discovery import choose_model, select_gemini_model


class TestChooseModel:
    def test_preferred_by_path_segment(self):
        names = ["models/gemini-1.5-pro", "models/gemini-1.5-flash"]
        assert choose_model(names) == "gemini-1.5-flash"

    def test_preferred_by_exact_name(self):
        assert choose_model(["gemini-pro-vision"]) == "gemini-pro-vision"

    def test_preference_order_not_list_order(self):
        names = ["models/gemini-pro-vision", "models/gemini-1.5-flash-latest"]
        assert choose_model(names) == "gemini-1.5-flash-latest"

    def test_secondary_keyword(self):
        names = ["models/text-bison", "models/gemini-2.0-flash-exp"]
        assert choose_model(names) == "gemini-2.0-flash-exp"

    def test_first_model_fallback(self):
        assert choose_model(["models/embedding-001", "models/aqa"]) == "embedding-001"

    def test_empty_is_hard_failure(self):
        with pytest.raises(NoModelsAvailableError):
            choose_model([])


class TestSelectGeminiModel:
    def test_queries_index(self, session, make_response):
        session.get.return_value = make_response(
            200, {"models": [{"name": "models/gemini-1.5-pro"}]}
        )
        assert select_gemini_model(session, "key", timeout=3) == "gemini-1.5-pro"
        assert session.get.call_args.kwargs["params"] == {"key": "key"}

    def test_empty_index(self, session, make_response):
        session.get.return_value = make_response(200, {})
        with pytest.raises(NoModelsAvailableError):
            select_gemini_model(session, "key", timeout=3)

    def test_http_error(self, session, make_response):
        session.get.return_value = make_response(403, {"error": "denied"})
        with pytest.raises(ProviderHTTPError):
            select_gemini_model(session, "key", timeout=3)

    def test_non_object_body(self, session, make_response):
        session.get.return_value = make_response(200, ["models/gemini-1.5-pro"])
        with pytest.raises(ClassificationError, match="Unexpected Gemini response"):
            select_gemini_model(session, "key", timeout=3)

    def test_skips_entries_without_name(self, session, make_response):
        session.get.return_value = make_response(
            200, {"models": [{"name": None}, "junk", {"name": "models/gemini-pro-vision"}]}
        )
        assert select_gemini_model(session, "key", timeout=3) == "gemini-pro-vision"
