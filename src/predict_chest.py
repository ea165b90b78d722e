# src/predict_chest.py
# Usage: python -m src.predict_chest <path_to_image> [--model PATH] [--show]
import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from src.config import ADVICE, CLASS_NAMES, MODEL_PATH, configure_logging
from src.model_loader import ModelLoader
from src.preprocess import decode_image, preprocess_image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Prediction:
    label: str
    prob_normal: float
    prob_pneumonia: float
    advice: str

    @property
    def normal_percent(self) -> str:
        return f"{self.prob_normal * 100:.2f}%"

    @property
    def pneumonia_percent(self) -> str:
        return f"{self.prob_pneumonia * 100:.2f}%"


def interpret_output(prob_normal: float) -> Prediction:
    """Map the sigmoid output, read as P(Normal), to a labelled prediction."""
    prob_normal = float(prob_normal)
    prob_pneumonia = 1.0 - prob_normal
    # strict comparison: 0.5 exactly is reported as Pneumonia
    label = CLASS_NAMES[0] if prob_normal > prob_pneumonia else CLASS_NAMES[1]
    return Prediction(
        label=label,
        prob_normal=prob_normal,
        prob_pneumonia=prob_pneumonia,
        advice=ADVICE[label],
    )


def predict_array(model, arr: np.ndarray) -> Prediction:
    output = model.predict(arr, verbose=0)
    prob_normal = float(np.asarray(output).reshape(-1)[0])
    prediction = interpret_output(prob_normal)
    logger.info("Raw model output %.4f -> %s", prob_normal, prediction.label)
    return prediction


def predict_file(model, img_path: Path):
    if not img_path.exists():
        raise FileNotFoundError(f"Image not found: {img_path}")
    image = decode_image(img_path.read_bytes())
    return predict_array(model, preprocess_image(image)), image


def show_prediction(image, prediction: Prediction):
    import matplotlib.pyplot as plt

    plt.figure(figsize=(6, 6))
    plt.imshow(image.convert("L"), cmap="gray")
    plt.title(f"{prediction.label} (Normal {prediction.normal_percent}, "
              f"Pneumonia {prediction.pneumonia_percent})")
    plt.axis("off")
    plt.show()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Classify one chest X-ray as Normal or Pneumonia.")
    parser.add_argument("image", type=Path, help="Path to the X-ray image.")
    parser.add_argument("--model", type=Path, default=MODEL_PATH, help="Path to the Keras model file.")
    parser.add_argument("--show", action="store_true", help="Display the image with the result.")
    args = parser.parse_args(argv)

    configure_logging()
    loader = ModelLoader(args.model).load()
    if not loader.ready:
        print(loader.error, file=sys.stderr)
        return 1

    try:
        prediction, image = predict_file(loader.model, args.image)
    except Exception as e:
        print(f"Prediction failed: {e}", file=sys.stderr)
        return 1

    print("\n===================================")
    print(f"Image: {args.image}")
    print(f"Prediction: {prediction.label}")
    print(f"Probability of Normal Lung: {prediction.normal_percent}")
    print(f"Probability of Pneumonia Lung: {prediction.pneumonia_percent}")
    print(f"Health advice: {prediction.advice}")
    print("===================================\n")

    if args.show:
        show_prediction(image, prediction)
    return 0


if __name__ == "__main__":
    sys.exit(main())
