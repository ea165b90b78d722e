# src/model_loader.py
import logging
import threading
from enum import Enum
from pathlib import Path

import tensorflow as tf

logger = logging.getLogger(__name__)


class ModelStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


def load_keras_model(model_path: Path):
    if not model_path.exists():
        raise FileNotFoundError(f"Model file not found: {model_path}")
    return tf.keras.models.load_model(str(model_path), compile=False)


class ModelLoader:
    """
    Loads the classifier once and remembers how it went.

    Status moves from LOADING to READY or FAILED and never changes again;
    a failed load is not retried.
    """

    def __init__(self, model_path, load_fn=None):
        self.model_path = Path(model_path)
        self._load_fn = load_fn or load_keras_model
        self.status = ModelStatus.LOADING
        self.model = None
        self.error = None
        self._done = threading.Event()
        self._thread = None

    @property
    def ready(self) -> bool:
        return self.status is ModelStatus.READY

    def start(self):
        """Load in a background thread. Safe to call more than once."""
        if self._thread is None and not self._done.is_set():
            self._thread = threading.Thread(target=self._run, name="model-loader", daemon=True)
            self._thread.start()
        return self

    def load(self):
        """Load in the calling thread, or wait for a load start() already began."""
        if self._thread is not None:
            self._done.wait()
        elif not self._done.is_set():
            self._run()
        return self

    def wait(self, timeout=None) -> bool:
        return self._done.wait(timeout)

    def _run(self):
        logger.info("Starting model loading from %s", self.model_path)
        try:
            model = self._load_fn(self.model_path)
        except Exception as e:
            self.error = f"Failed to load model: {e}"
            self.status = ModelStatus.FAILED
            logger.exception("Model failed to load from %s", self.model_path)
        else:
            # handle first, status second: readers check status before touching model
            self.model = model
            self.status = ModelStatus.READY
            logger.info("Model loaded successfully from %s", self.model_path)
        finally:
            self._done.set()
