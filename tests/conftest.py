from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from app import create_app
from src.model_loader import ModelLoader


class FakeModel:
    """Stands in for a Keras model with a single sigmoid output."""

    def __init__(self, output=0.82, error=None):
        self.output = output
        self.error = error
        self.inputs = []

    def predict(self, x, verbose=0):
        self.inputs.append(x)
        if self.error is not None:
            raise self.error
        return np.array([[self.output]], dtype=np.float32)


def image_bytes(size=(300, 200), mode="RGB", color=(120, 60, 200), fmt="PNG"):
    buf = BytesIO()
    Image.new(mode, size, color).save(buf, format=fmt)
    return buf.getvalue()


def ready_loader(model):
    return ModelLoader("model.h5", load_fn=lambda path: model).load()


@pytest.fixture
def fake_model():
    return FakeModel(0.82)


@pytest.fixture
def loader(fake_model):
    return ready_loader(fake_model)


@pytest.fixture
def client(loader):
    app = create_app(loader=loader)
    app.config["TESTING"] = True
    return app.test_client()
