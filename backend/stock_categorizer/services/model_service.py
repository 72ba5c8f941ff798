"""On-device model service - owns the load-once image classifier."""
import threading
from collections.abc import Callable

import structlog
from PIL import Image

from ..classifiers.cascade import Prediction
from ..utils.image import load_image

logger = structlog.get_logger()


def _default_factory(model_name: str):
    from transformers import pipeline

    return pipeline(task="image-classification", model=model_name)


class LocalModelHandle:
    """Lazily loads a transformers image-classification pipeline once.

    The handle is created by the application and passed to whoever needs
    it. Concurrent first calls to ``get()`` block on the same lock, so the
    pipeline is built exactly once.
    """

    def __init__(
        self,
        model_name: str,
        top_k: int = 5,
        factory: Callable[[str], object] | None = None,
    ):
        self.model_name = model_name
        self.top_k = top_k
        self._factory = factory or _default_factory
        self._pipeline = None
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._pipeline is not None

    def get(self):
        """Return the pipeline, loading it on first use."""
        if self._pipeline is not None:
            return self._pipeline
        with self._lock:
            if self._pipeline is None:
                logger.info("loading_local_model", model=self.model_name)
                self._pipeline = self._factory(self.model_name)
                logger.info("local_model_loaded", model=self.model_name)
        return self._pipeline

    def predict(self, image_path: str) -> list[Prediction]:
        """Top-K predictions for an image, highest probability first."""
        classifier = self.get()
        image: Image.Image = load_image(image_path)
        raw = classifier(image, top_k=self.top_k)
        predictions = [
            Prediction(label=str(p["label"]), probability=float(p["score"]))
            for p in raw
        ]
        predictions.sort(key=lambda p: p.probability, reverse=True)
        return predictions[: self.top_k]

    def unload(self) -> None:
        with self._lock:
            self._pipeline = None
