# src/config.py
import logging
import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# ------- MODEL CONFIG --------
MODEL_PATH = Path(os.getenv("MODEL_PATH", PROJECT_ROOT / "outputs" / "chest_model.h5"))
IMG_SIZE = (150, 150)
CLASS_NAMES = ["Normal", "Pneumonia"]  # model output is P(Normal)

# ------- UPLOADS --------
ALLOWED_FORMATS = {"PNG", "JPEG", "BMP", "GIF", "WEBP"}  # decoded content, not filename
ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "bmp", "gif", "webp"}
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))

# ------- EVALUATION --------
DATA_ROOT = Path(os.getenv("DATA_ROOT", PROJECT_ROOT / "chest_xray"))
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", PROJECT_ROOT / "outputs"))

# ------- SERVER --------
PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ------- HEALTH ADVICE --------
ADVICE = {
    "Normal": (
        "Your lungs are healthy! To prevent pneumonia, maintain good hygiene, "
        "avoid smoking, stay active, and get vaccinated against pneumococcal pneumonia."
    ),
    "Pneumonia": (
        "If you have pneumonia, seek medical attention immediately. Early treatment "
        "with antibiotics or antivirals may be necessary depending on the type. "
        "Get plenty of rest, stay hydrated, and follow your doctor's advice for medications."
    ),
}


def configure_logging(level=None):
    """Send log records to stderr once, at LOG_LEVEL unless told otherwise."""
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
