# this is the flask server that puts the hide/reveal stuff behind a little http api
# a frontend uploads an image, we run it through steganography.py and send json back
#
# config comes from flags or env vars:
#   STEGOCHAOS_HOST, STEGOCHAOS_PORT, STEGOCHAOS_MAX_UPLOAD_MB

import argparse
import base64
import logging
import os
from io import BytesIO
from pathlib import Path

from flask import Flask, request, jsonify
from PIL import Image

from steganography import encode_message, decode_message, image_capacity


logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5050
DEFAULT_MAX_UPLOAD_MB = 16


def _preview(src) -> str:
    # small jpeg thumbnail as a data url so the frontend can stick it in an <img>
    # (jpeg is fine here, it's only for looking at - never for the real stego image)
    with Image.open(src) as img:
        thumb = img.convert("RGB")
        thumb.thumbnail((400, 300))
        buf = BytesIO()
        thumb.save(buf, format="JPEG", quality=80)
    return f"data:image/jpeg;base64,{base64.b64encode(buf.getvalue()).decode()}"


def _status(result: dict) -> int:
    if result["success"]:
        return 200
    if result.get("error") in ("invalid_input", "io_error"):
        return 400
    return 422


def create_app(max_upload_mb: int = DEFAULT_MAX_UPLOAD_MB) -> Flask:
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = max_upload_mb * 1024 * 1024

    # returns how big the image is and how many chars fit in it
    @app.route("/api/info", methods=["POST"])
    def api_info():
        if "image" not in request.files:
            return jsonify({"success": False, "error": "invalid_input",
                            "message": "No image provided"}), 400

        file = request.files["image"]
        data = BytesIO(file.read())
        result = image_capacity(data)
        if result["success"]:
            data.seek(0)
            result["preview"] = _preview(data)
        result["filename"] = file.filename
        return jsonify(result), _status(result)

    # takes an image + message + key, sends the stego png back as base64
    @app.route("/api/encode", methods=["POST"])
    def api_encode():
        if "image" not in request.files:
            return jsonify({"success": False, "error": "invalid_input",
                            "message": "No image provided"}), 400

        file = request.files["image"]
        message = request.form.get("message", "")
        key = request.form.get("key", "")
        if not message.strip():
            return jsonify({"success": False, "error": "invalid_input",
                            "message": "Message cannot be empty"}), 400
        if not key.strip():
            return jsonify({"success": False, "error": "invalid_input",
                            "message": "Key cannot be empty"}), 400

        out = BytesIO()
        result = encode_message(BytesIO(file.read()), message, out, key)
        logger.info("encode %s: %s", file.filename, result.get("error", "ok"))

        if result["success"]:
            stego_png = out.getvalue()
            stem = Path(file.filename or "image").stem
            result["stego_image"] = f"data:image/png;base64,{base64.b64encode(stego_png).decode()}"
            result["preview"] = _preview(BytesIO(stego_png))
            result["filename"] = f"{stem}_stego.png"

        return jsonify(result), _status(result)

    # takes a stego image + key and sends the hidden message back
    @app.route("/api/decode", methods=["POST"])
    def api_decode():
        if "image" not in request.files:
            return jsonify({"success": False, "error": "invalid_input",
                            "message": "No image provided"}), 400

        file = request.files["image"]
        key = request.form.get("key", "")
        if not key.strip():
            return jsonify({"success": False, "error": "invalid_input",
                            "message": "Key cannot be empty", "secret": None}), 400

        result = decode_message(BytesIO(file.read()), key)
        logger.info("decode %s: %s", file.filename, result.get("error", "ok"))
        result["filename"] = file.filename
        return jsonify(result), _status(result)

    return app


def main(argv=None):
    parser = argparse.ArgumentParser(prog="stegochaos-server", description="StegoChaos HTTP API")
    parser.add_argument("--host", default=os.environ.get("STEGOCHAOS_HOST", DEFAULT_HOST))
    parser.add_argument("--port", type=int,
                        default=int(os.environ.get("STEGOCHAOS_PORT", DEFAULT_PORT)))
    parser.add_argument("--max-upload-mb", type=int,
                        default=int(os.environ.get("STEGOCHAOS_MAX_UPLOAD_MB", DEFAULT_MAX_UPLOAD_MB)))
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    print("\n" + "═" * 55)
    print("  🔐  StegoChaos Server")
    print(f"  → Open:  http://{args.host}:{args.port}")
    print("  → Stop:  Ctrl + C")
    print("═" * 55 + "\n")
    create_app(args.max_upload_mb).run(host=args.host, port=args.port, debug=False)


if __name__ == "__main__":
    main()
