# src/preprocess.py
from io import BytesIO

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from src.config import ALLOWED_FORMATS, IMG_SIZE
from src.errors import InvalidImageError


def decode_image(raw_bytes: bytes) -> Image.Image:
    """Decode uploaded bytes into an upright RGB image."""
    try:
        image = Image.open(BytesIO(raw_bytes))
        image_format = image.format
        image = ImageOps.exif_transpose(image).convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImageError() from e
    if image_format not in ALLOWED_FORMATS:
        raise InvalidImageError(f"Unsupported image format: {image_format}")
    return image


def preprocess_image(image: Image.Image) -> np.ndarray:
    """
    Turn a decoded image into the model input.

    Bilinear resize to IMG_SIZE, average the RGB channels into one grey
    channel, scale to [0, 1]. Result shape: (1, 150, 150, 1), float32.
    """
    image = image.convert("RGB").resize(IMG_SIZE, Image.BILINEAR)
    arr = np.asarray(image, dtype=np.float32).mean(axis=-1)
    arr = np.expand_dims(arr, axis=-1)  # channel dim
    arr = np.expand_dims(arr, axis=0)  # batch dim
    return arr / 255.0
