# end-to-end tests through real png files
# make a carrier, hide a message, read it back with the right key, the wrong key, and no file at all

from PIL import Image

from steganography import (
    decode_message,
    encode_message,
    image_capacity,
    load_pixels,
    save_pixels,
)
from stego_engine import encode

MESSAGE = "psst 🔐"
KEY = "hunter2"


def test_encode_then_decode(carrier_png, tmp_path):
    out = tmp_path / "stego.png"
    r = encode_message(carrier_png, MESSAGE, out, key=KEY)
    assert r["success"], r["message"]
    assert r["used"] == len(MESSAGE) + 1  # the emoji is two code units
    assert r["capacity"] == (200 * 200 * 3 - 32) // 16

    r = decode_message(out, key=KEY)
    assert r["success"], r["message"]
    assert r["secret"] == MESSAGE


def test_wrong_key(carrier_png, tmp_path):
    out = tmp_path / "stego.png"
    assert encode_message(carrier_png, MESSAGE, out, key=KEY)["success"]

    r = decode_message(out, key="wrongpassword123")
    if r["success"]:
        assert r["secret"] != MESSAGE
    else:
        assert r["error"] == "decode_failure"
        assert r["secret"] is None


def test_unencoded_image(carrier_png):
    r = decode_message(carrier_png, key=KEY)
    assert not r["success"]
    assert r["error"] == "decode_failure"


def test_message_too_long(carrier_png, tmp_path):
    out = tmp_path / "stego.png"
    r = encode_message(carrier_png, "x" * 8000, out, key=KEY)
    assert not r["success"]
    assert r["error"] == "capacity_exceeded"
    assert not out.exists()


def test_empty_key(carrier_png, tmp_path):
    r = encode_message(carrier_png, MESSAGE, tmp_path / "stego.png", key="")
    assert not r["success"]
    assert r["error"] == "invalid_input"


def test_missing_file(tmp_path):
    r = decode_message(tmp_path / "nope.png", key=KEY)
    assert not r["success"]
    assert r["error"] == "io_error"
    assert r["message"] == "Image file not found."


def test_not_an_image(tmp_path):
    junk = tmp_path / "junk.png"
    junk.write_bytes(b"definitely not a png")
    r = encode_message(junk, MESSAGE, tmp_path / "out.png", key=KEY)
    assert not r["success"]
    assert r["error"] == "io_error"


def test_png_keeps_every_bit(make_buffer, tmp_path):
    stego = encode(make_buffer(200, 200), "bits", "k")
    path = tmp_path / "roundtrip.png"
    save_pixels(stego, path)
    assert load_pixels(path) == stego


def test_alpha_survives(tmp_path):
    src = tmp_path / "rgba.png"
    Image.new("RGBA", (200, 200), color=(10, 20, 30, 77)).save(src)
    out = tmp_path / "out.png"
    assert encode_message(src, "alpha", out, key=KEY)["success"]
    with Image.open(out) as img:
        assert img.mode == "RGBA"
        assert set(img.getdata(band=3)) == {77}


def test_image_capacity(carrier_png):
    r = image_capacity(carrier_png)
    assert r["success"]
    assert (r["width"], r["height"], r["mode"]) == (200, 200, "RGB")
    assert r["capacity_chars"] == 7498


def test_unwritable_output(carrier_png, tmp_path):
    out = tmp_path / "missing_dir" / "out.png"
    r = encode_message(carrier_png, "hi", out, key=KEY)
    assert not r["success"]
    assert r["error"] == "io_error"
    assert r["message"].startswith("Could not save image")
    assert not out.exists()
