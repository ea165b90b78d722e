# src/evaluate_chest.py
# Usage: python -m src.evaluate_chest --data chest_xray/test --out outputs
import argparse
import logging
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from sklearn.metrics import classification_report, confusion_matrix, roc_auc_score, roc_curve

from src.config import ALLOWED_EXTENSIONS, CLASS_NAMES, DATA_ROOT, MODEL_PATH, OUTPUT_DIR, configure_logging
from src.errors import InvalidImageError
from src.model_loader import ModelLoader
from src.predict_chest import predict_file

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {f".{ext}" for ext in ALLOWED_EXTENSIONS}


def iter_labelled_images(data_dir: Path):
    """Yield (path, label) for DIR/NORMAL/* and DIR/PNEUMONIA/*."""
    for label in CLASS_NAMES:
        folder = data_dir / label.upper()
        if not folder.is_dir():
            logger.warning("Class folder not found: %s", folder)
            continue
        for path in sorted(folder.iterdir()):
            if path.suffix.lower() in IMAGE_SUFFIXES:
                yield path, label


def collect_predictions(model, data_dir: Path):
    y_true, y_pred, y_prob = [], [], []
    for path, label in iter_labelled_images(data_dir):
        try:
            prediction, _ = predict_file(model, path)
        except InvalidImageError:
            logger.warning("Skipping unreadable image: %s", path)
            continue
        y_true.append(label)
        y_pred.append(prediction.label)
        y_prob.append(prediction.prob_pneumonia)
    return y_true, y_pred, np.array(y_prob, dtype=np.float32)


def save_confusion_matrix(y_true, y_pred, out_dir: Path) -> Path:
    cm = confusion_matrix(y_true, y_pred, labels=CLASS_NAMES)
    plt.figure(figsize=(6, 5))
    sns.heatmap(cm, annot=True, fmt="d", xticklabels=CLASS_NAMES, yticklabels=CLASS_NAMES)
    plt.xlabel("Predicted")
    plt.ylabel("True")
    plt.title("Confusion Matrix (Test)")
    cm_path = out_dir / "confusion_matrix.png"
    plt.savefig(cm_path, bbox_inches="tight")
    plt.close()
    return cm_path


def save_roc_curve(y_true, y_prob, out_dir: Path) -> Path:
    # positive class is Pneumonia
    y_bin = np.array([int(label == CLASS_NAMES[1]) for label in y_true])
    auc = roc_auc_score(y_bin, y_prob)
    fpr, tpr, _ = roc_curve(y_bin, y_prob)
    plt.figure()
    plt.plot(fpr, tpr, label=f"AUC = {auc:.3f}")
    plt.plot([0, 1], [0, 1], "k--")
    plt.xlabel("False Positive Rate")
    plt.ylabel("True Positive Rate")
    plt.title("ROC Curve (Test)")
    plt.legend()
    roc_path = out_dir / "roc.png"
    plt.savefig(roc_path, bbox_inches="tight")
    plt.close()
    return roc_path


def evaluate(model, data_dir: Path, out_dir: Path) -> dict:
    y_true, y_pred, y_prob = collect_predictions(model, data_dir)
    if not y_true:
        raise ValueError(f"No images found under {data_dir}")

    out_dir.mkdir(parents=True, exist_ok=True)
    report = classification_report(y_true, y_pred, labels=CLASS_NAMES, zero_division=0)
    outputs = {
        "count": len(y_true),
        "report": report,
        "confusion_matrix": save_confusion_matrix(y_true, y_pred, out_dir),
        "roc": None,
    }
    if len(set(y_true)) == 2:
        outputs["roc"] = save_roc_curve(y_true, y_prob, out_dir)
    else:
        logger.warning("Only one class present, skipping ROC curve")
    return outputs


def main(argv=None):
    parser = argparse.ArgumentParser(description="Evaluate the classifier on a labelled X-ray folder.")
    parser.add_argument("--data", type=Path, default=DATA_ROOT / "test", help="Folder with NORMAL/ and PNEUMONIA/.")
    parser.add_argument("--model", type=Path, default=MODEL_PATH, help="Path to the Keras model file.")
    parser.add_argument("--out", type=Path, default=OUTPUT_DIR, help="Where to write the plots.")
    args = parser.parse_args(argv)

    configure_logging()
    loader = ModelLoader(args.model).load()
    if not loader.ready:
        print(loader.error, file=sys.stderr)
        return 1

    try:
        result = evaluate(loader.model, args.data, args.out)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 1

    print(f"\nClassification report on {result['count']} images:")
    print(result["report"])
    print("Saved:", result["confusion_matrix"])
    if result["roc"] is not None:
        print("Saved:", result["roc"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
