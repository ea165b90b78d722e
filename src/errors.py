# src/errors.py
"""User-facing failures of a single classification attempt.

Each error carries the notice shown to the user and the HTTP status the web
layer answers with. None of them is retried.
"""


class ClassificationError(Exception):
    notice = "Prediction failed."
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.notice)


class ModelNotReadyError(ClassificationError):
    notice = "Model isn't loaded yet. Please wait."
    status_code = 503


class NoImageError(ClassificationError):
    notice = "Please upload an image."
    status_code = 400


class InvalidImageError(ClassificationError):
    notice = "Invalid image file. Please upload a PNG, JPG, BMP, GIF or WEBP chest X-ray."
    status_code = 400


class PredictionError(ClassificationError):
    pass
