import base64
from io import BytesIO

import pytest
from PIL import Image

from server import create_app


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def _png(size=(200, 200), color=(42, 58, 90)):
    buf = BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="PNG")
    return buf.getvalue()


def _post(client, url, png, **fields):
    data = {"image": (BytesIO(png), "photo.png"), **fields}
    return client.post(url, data=data, content_type="multipart/form-data")


def test_info(client):
    resp = _post(client, "/api/info", _png())
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["capacity_chars"] == 7498
    assert body["preview"].startswith("data:image/jpeg;base64,")


def test_encode_then_decode(client):
    resp = _post(client, "/api/encode", _png(), message="over http", key="abc")
    body = resp.get_json()
    assert resp.status_code == 200, body
    assert body["filename"] == "photo_stego.png"
    prefix = "data:image/png;base64,"
    assert body["stego_image"].startswith(prefix)
    stego_png = base64.b64decode(body["stego_image"][len(prefix):])

    resp = _post(client, "/api/decode", stego_png, key="abc")
    assert resp.status_code == 200
    assert resp.get_json()["secret"] == "over http"


def test_decode_wrong_image(client):
    resp = _post(client, "/api/decode", _png(), key="abc")
    assert resp.status_code == 422
    assert resp.get_json()["error"] == "decode_failure"


def test_encode_too_big(client):
    resp = _post(client, "/api/encode", _png(size=(2, 2)), message="Hi", key="abc")
    assert resp.status_code == 422
    assert resp.get_json()["error"] == "capacity_exceeded"


@pytest.mark.parametrize("fields", [{"message": "", "key": "abc"}, {"message": "hi", "key": ""}])
def test_encode_empty_fields(client, fields):
    resp = _post(client, "/api/encode", _png(), **fields)
    assert resp.status_code == 400


def test_missing_image(client):
    resp = client.post("/api/decode", data={"key": "abc"}, content_type="multipart/form-data")
    assert resp.status_code == 400


def test_not_an_image(client):
    resp = _post(client, "/api/decode", b"not a png", key="abc")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "io_error"


@pytest.mark.parametrize("url,fields", [
    ("/api/encode", {"message": "   ", "key": "abc"}),
    ("/api/encode", {"message": "hi", "key": " \t"}),
    ("/api/decode", {"key": "  "}),
])
def test_blank_fields_rejected(client, url, fields):
    resp = _post(client, url, _png(), **fields)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid_input"


@pytest.mark.parametrize("url", ["/api/info", "/api/encode", "/api/decode"])
def test_missing_image_has_error_code(client, url):
    resp = client.post(url, data={"message": "hi", "key": "abc"},
                       content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid_input"
