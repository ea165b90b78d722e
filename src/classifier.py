# src/classifier.py
import logging
from typing import Optional

from src.errors import (
    ClassificationError,
    ModelNotReadyError,
    NoImageError,
    PredictionError,
)
from src.model_loader import ModelLoader, ModelStatus
from src.predict_chest import Prediction, predict_array
from src.preprocess import decode_image, preprocess_image

logger = logging.getLogger(__name__)


class Classifier:
    """
    State behind one classifier page: the model status, the selected image
    and the last prediction.

    The prediction only changes when classify() succeeds. Every refused or
    failed attempt raises a ClassificationError and leaves the state as it was.
    """

    def __init__(self, loader: ModelLoader):
        self.loader = loader
        self.image_bytes: Optional[bytes] = None
        self.filename: Optional[str] = None
        self.prediction: Optional[Prediction] = None

    @property
    def model_status(self) -> ModelStatus:
        return self.loader.status

    def select_image(self, raw_bytes: bytes, filename: Optional[str] = None):
        if not raw_bytes:
            return
        self.image_bytes = raw_bytes
        self.filename = filename
        logger.info("Image file selected: %s (%d bytes)", filename or "<unnamed>", len(raw_bytes))

    def classify(self) -> Prediction:
        if not self.loader.ready:
            raise ModelNotReadyError()
        if not self.image_bytes:
            raise NoImageError()

        try:
            image = decode_image(self.image_bytes)
            arr = preprocess_image(image)
            prediction = predict_array(self.loader.model, arr)
        except ClassificationError:
            raise
        except Exception as e:
            logger.exception("Error during prediction for %s", self.filename)
            raise PredictionError() from e

        self.prediction = prediction
        return prediction
