import threading
from io import BytesIO

from conftest import FakeModel, image_bytes, ready_loader
from app import create_app
from src.model_loader import ModelLoader


def upload(data, filename="xray.png"):
    return {"image": (BytesIO(data), filename)}


def test_predict_normal(client):
    resp = client.post("/predict", data=upload(image_bytes()), content_type="multipart/form-data")
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert "Prediction Result:" in html
    assert "Probability of Normal Lung: 82.00%" in html
    assert "Probability of Pneumonia Lung: 18.00%" in html
    assert "Your lungs are healthy!" in html


def test_predict_pneumonia():
    client = create_app(loader=ready_loader(FakeModel(0.10))).test_client()
    resp = client.post("/predict", data=upload(image_bytes(fmt="JPEG"), "scan.jpg"),
                       content_type="multipart/form-data")
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "Probability of Normal Lung: 10.00%" in html
    assert "Probability of Pneumonia Lung: 90.00%" in html
    assert "seek medical attention immediately" in html


def test_predict_without_image(client, fake_model):
    resp = client.post("/predict", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400
    html = resp.get_data(as_text=True)
    assert "Please upload an image." in html
    assert "Prediction Result:" not in html
    assert fake_model.inputs == []


def test_predict_non_image_content(client, fake_model):
    resp = client.post("/predict", data=upload(b"hello", "xray.png"), content_type="multipart/form-data")
    assert resp.status_code == 400
    assert "Invalid image file" in resp.get_data(as_text=True)
    assert fake_model.inputs == []


def test_predict_while_loading():
    release = threading.Event()
    loader = ModelLoader("model.h5", load_fn=lambda path: release.wait(5) and FakeModel())
    client = create_app(loader=loader).test_client()
    try:
        resp = client.post("/predict", data=upload(image_bytes()), content_type="multipart/form-data")
        assert resp.status_code == 503
        html = resp.get_data(as_text=True)
        assert "Model isn&#39;t loaded yet. Please wait." in html
        assert "Prediction Result:" not in html
        assert client.get("/status").get_json() == {"status": "loading", "error": None}
    finally:
        release.set()
        loader.wait(5)
    assert client.get("/status").get_json()["status"] == "ready"


def test_failed_model_disables_classify():
    def broken(path):
        raise OSError("no weights")

    client = create_app(loader=ModelLoader("model.h5", load_fn=broken).load()).test_client()
    page = client.get("/service_dashboard").get_data(as_text=True)
    assert "Model failed to load" in page
    assert "disabled>Classify" in page

    body = client.get("/status").get_json()
    assert body["status"] == "failed"
    assert "no weights" in body["error"]

    resp = client.post("/predict", data=upload(image_bytes()), content_type="multipart/form-data")
    assert resp.status_code == 503


def test_inference_error_shows_notice():
    client = create_app(loader=ready_loader(FakeModel(error=RuntimeError("boom")))).test_client()
    resp = client.post("/predict", data=upload(image_bytes()), content_type="multipart/form-data")
    assert resp.status_code == 500
    assert "Prediction failed." in resp.get_data(as_text=True)


def test_upload_too_large(loader):
    app = create_app(loader=loader)
    app.config["MAX_CONTENT_LENGTH"] = 1024
    resp = app.test_client().post("/predict", data=upload(b"x" * 4096), content_type="multipart/form-data")
    assert resp.status_code == 413
    assert "Image is too large" in resp.get_data(as_text=True)


def test_ready_page_enables_classify(client):
    page = client.get("/service_dashboard").get_data(as_text=True)
    assert "Loading model" not in page
    assert "disabled>Classify" not in page


def test_static_pages(client):
    assert client.get("/").status_code == 200
    assert "ready" in client.get("/").get_data(as_text=True)
    assert client.get("/about").status_code == 200
    assert client.get("/healthz").get_json() == {"status": "ok"}


def test_extensionless_image_is_classified(client):
    resp = client.post("/predict", data=upload(image_bytes(), "xray_scan"), content_type="multipart/form-data")
    assert resp.status_code == 200
    assert "Probability of Normal Lung: 82.00%" in resp.get_data(as_text=True)


def test_loading_wins_over_bad_upload():
    release = threading.Event()
    loader = ModelLoader("model.h5", load_fn=lambda path: release.wait(5) and FakeModel())
    client = create_app(loader=loader).test_client()
    try:
        for data, filename in [(image_bytes(), "xray"), (b"hello", "notes.txt")]:
            resp = client.post("/predict", data=upload(data, filename), content_type="multipart/form-data")
            assert resp.status_code == 503
            assert "Model isn&#39;t loaded yet. Please wait." in resp.get_data(as_text=True)
    finally:
        release.set()
        loader.wait(5)
