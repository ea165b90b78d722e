from flask import Flask, jsonify, render_template, request
from werkzeug.exceptions import RequestEntityTooLarge

from src import config
from src.classifier import Classifier
from src.errors import ClassificationError
from src.model_loader import ModelLoader


def create_app(loader=None):
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.MAX_UPLOAD_MB * 1024 * 1024

    # load model once when app starts; requests only ever read it
    if loader is None:
        loader = ModelLoader(config.MODEL_PATH)
    app.extensions["model_loader"] = loader
    loader.start()

    def render_classifier(classifier, notice=None, status=200):
        return render_template(
            "service_dashboard.html",
            status=loader.status.value,
            model_error=loader.error,
            prediction=classifier.prediction,
            notice=notice,
        ), status

    # -------- ROUTES --------

    @app.route("/", methods=["GET"])
    def home():
        return render_template("dashboard.html", status=loader.status.value)

    @app.route("/service_dashboard", methods=["GET"])
    def service_dashboard():
        return render_classifier(Classifier(loader))

    @app.route("/about", methods=["GET"])
    def about():
        return render_template("about_us.html")

    @app.route("/status", methods=["GET"])
    def status():
        return jsonify({"status": loader.status.value, "error": loader.error})

    @app.route("/healthz", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    @app.route("/predict", methods=["POST"])
    def predict():
        classifier = Classifier(loader)

        # "image" must match the name in <input type="file" name="image">
        file = request.files.get("image")
        try:
            if file is not None and file.filename:
                classifier.select_image(file.read(), file.filename)
            classifier.classify()
        except ClassificationError as e:
            app.logger.warning("Classification refused: %s", e)
            return render_classifier(classifier, notice=e.notice, status=e.status_code)

        return render_classifier(classifier)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e):
        notice = f"Image is too large. The limit is {config.MAX_UPLOAD_MB} MB."
        return render_classifier(Classifier(loader), notice=notice, status=413)

    return app


if __name__ == "__main__":
    config.configure_logging()
    create_app().run(host="0.0.0.0", port=config.PORT)
