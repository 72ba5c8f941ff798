"""Tests for the on-device cascade and adapter."""
import threading
import time
from unittest.mock import MagicMock

import pytest

from stock_categorizer.classifiers.base import Credential, ProviderId
from stock_categorizer.classifiers.cascade import (
    Prediction,
    classify_predictions,
    extract_words,
)
from stock_categorizer.classifiers.local_device import LocalDeviceAdapter
from stock_categorizer.services.model_service import LocalModelHandle


class TestExtractWords:
    def test_splits_on_commas_and_spaces(self):
        words = extract_words([Prediction("tabby, tabby cat", 0.6), Prediction("Egyptian cat", 0.2)])
        assert words == {"tabby", "cat", "egyptian"}


class TestClassifyPredictions:
    def test_no_predictions(self):
        result = classify_predictions([])
        assert result.category == "Graphic Resources"
        assert result.confidence == 0.0

    def test_person_alone_is_people(self):
        result = classify_predictions([Prediction("groom, bridegroom", 0.7)])
        assert result.category == "People"
        assert result.confidence == 0.7

    def test_person_with_office_is_business(self):
        preds = [Prediction("suit, suit of clothes", 0.5), Prediction("notebook, notebook computer", 0.3)]
        assert classify_predictions(preds).category == "Business"

    def test_food_beats_plants(self):
        preds = [Prediction("mushroom", 0.5), Prediction("pot, flowerpot", 0.2)]
        assert classify_predictions(preds).category == "Food"

    def test_animals(self):
        preds = [Prediction("golden retriever", 0.9)]
        result = classify_predictions(preds)
        assert result.category == "Animals"
        assert "golden retriever" in result.reasoning

    def test_landscapes(self):
        assert classify_predictions([Prediction("alp", 0.4), Prediction("valley, vale", 0.3)]).category == "Landscapes"

    def test_technology_without_people(self):
        result = classify_predictions([Prediction("desktop computer", 0.8)])
        assert result.category == "Technology"
        assert "without people" in result.reasoning

    def test_default(self):
        result = classify_predictions([Prediction("jigsaw puzzle", 0.3)])
        assert result.category == "Graphic Resources"
        assert result.confidence == 0.3


class TestLocalModelHandle:
    def test_loads_once(self):
        factory = MagicMock(return_value=MagicMock())
        handle = LocalModelHandle("some/model", factory=factory)
        assert not handle.is_loaded
        first = handle.get()
        second = handle.get()
        assert first is second
        factory.assert_called_once_with("some/model")
        assert handle.is_loaded

    def test_concurrent_first_load_collapses(self):
        calls = []

        def slow_factory(name):
            calls.append(name)
            time.sleep(0.05)
            return object()

        handle = LocalModelHandle("some/model", factory=slow_factory)
        results = []
        threads = [threading.Thread(target=lambda: results.append(handle.get())) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert len({id(r) for r in results}) == 1

    def test_predict_sorts_and_limits(self, image_path):
        pipeline = MagicMock(return_value=[
            {"label": "b", "score": 0.2},
            {"label": "a", "score": 0.7},
            {"label": "c", "score": 0.1},
        ])
        handle = LocalModelHandle("m", top_k=2, factory=lambda name: pipeline)
        predictions = handle.predict(image_path)
        assert [p.label for p in predictions] == ["a", "b"]
        assert pipeline.call_args.kwargs["top_k"] == 2


class TestLocalDeviceAdapter:
    @pytest.fixture
    def handle(self):
        handle = MagicMock()
        handle.predict.return_value = [
            Prediction("tabby, tabby cat", 0.62),
            Prediction("tiger cat", 0.2),
        ]
        return handle

    def test_cascade_strategy(self, handle, image_path):
        adapter = LocalDeviceAdapter(handle)
        result = adapter.classify(image_path, Credential(ProviderId.LOCAL_DEVICE, "LOCAL_MODE"))
        assert result.category == "Animals"
        assert result.confidence == pytest.approx(0.62)
        assert result.labels == ("tabby, tabby cat", "tiger cat")

    def test_mapper_strategy(self, handle, image_path):
        adapter = LocalDeviceAdapter(handle, strategy="mapper")
        result = adapter.classify(image_path)
        assert result.category == "Animals"
        assert result.confidence == pytest.approx(0.7 + 0.082)

    def test_unknown_strategy(self, handle):
        with pytest.raises(ValueError):
            LocalDeviceAdapter(handle, strategy="21-rules")

    def test_model_error_is_failure(self, image_path):
        handle = MagicMock()
        handle.predict.side_effect = OSError("weights missing")
        result = LocalDeviceAdapter(handle).classify(image_path)
        assert result.failed
        assert "weights missing" in result.reasoning
