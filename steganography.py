# main file for working with actual image files
# stego_engine.py does the bit twiddling on raw pixels, this file is the glue:
# open the image with pillow, hand the pixels over, save the result as png
#
# everything here returns a dict with "success" + "message" so the cli and the
# flask server can just print / jsonify it without caring what went wrong

import logging

from PIL import Image, UnidentifiedImageError

from errors import StegoError
from stego_engine import PixelBuffer, capacity_chars, decode, encode


logger = logging.getLogger(__name__)


def load_pixels(src) -> PixelBuffer:
    # src can be a path or any file-like object pillow understands
    # always go through RGBA so every pixel is exactly 4 bytes
    with Image.open(src) as img:
        rgba = img.convert("RGBA")
        return PixelBuffer(rgba.width, rgba.height, rgba.tobytes())


def save_pixels(buffer: PixelBuffer, dst) -> None:
    # always png!! jpeg or any other lossy format would wreck the hidden bits
    img = Image.frombytes("RGBA", (buffer.width, buffer.height), buffer.data)
    img.save(dst, format="PNG")


def _failure(exc: Exception, **extra) -> dict:
    if isinstance(exc, StegoError):
        code, text = exc.code, exc.message
    elif isinstance(exc, FileNotFoundError):
        code, text = "io_error", "Image file not found."
    else:
        code, text = "io_error", f"Could not read image: {exc}"
    return {"success": False, "error": code, "message": text, **extra}


def encode_message(image_path, message: str, output_path, key: str) -> dict:
    # this is where the magic happens!!
    # args:
    #   image_path  - the normal image we're hiding stuff in
    #   message     - the secret text we wanna hide
    #   output_path - where to save the new "secret" image (use .png!!)
    #   key         - decides which pixels get used, you need it again to decode
    #
    # returns a dict with success, a message string, capacity and how much we used
    # (capacity/used are in characters)
    try:
        buffer = load_pixels(image_path)
    except (FileNotFoundError, UnidentifiedImageError, OSError) as exc:
        logger.warning("could not load carrier %s: %s", image_path, exc)
        return _failure(exc, capacity=0, used=0)

    capacity = capacity_chars(buffer.width, buffer.height)
    used = len(message.encode("utf-16-be", "surrogatepass")) // 2
    try:
        stego = encode(buffer, message, key)
    except StegoError as exc:
        logger.info("encode rejected (%s): %s", exc.code, exc.message)
        return _failure(exc, capacity=capacity, used=used)

    try:
        save_pixels(stego, output_path)
    except OSError as exc:
        # missing folder, read-only path, full disk...
        logger.warning("could not save stego image to %s: %s", output_path, exc)
        result = _failure(exc, capacity=capacity, used=used)
        result["message"] = f"Could not save image: {exc}"
        return result

    logger.debug("hid %d chars in %dx%d image", used, buffer.width, buffer.height)
    return {
        "success": True,
        "message": "Message successfully hidden in image! ✓",
        "capacity": capacity,
        "used": used,
    }


def decode_message(image_path, key: str) -> dict:
    # reverse of encode - dig the hidden message back out using the same key
    # a wrong key just means "no message found", not a crash
    try:
        buffer = load_pixels(image_path)
    except (FileNotFoundError, UnidentifiedImageError, OSError) as exc:
        logger.warning("could not load stego image %s: %s", image_path, exc)
        return _failure(exc, secret=None)

    try:
        secret = decode(buffer, key)
    except StegoError as exc:
        logger.info("decode failed (%s): %s", exc.code, exc.message)
        result = _failure(exc, secret=None)
        if exc.code == "decode_failure":
            result["message"] = "No hidden message found in this image (or wrong key)."
        return result

    return {"success": True, "message": "Message extracted successfully! ✓", "secret": secret}


def image_capacity(image_path) -> dict:
    # tells you how many characters you can hide in a given image
    # 3 bits per pixel, minus the 32-bit header, 16 bits per character
    try:
        with Image.open(image_path) as img:
            w, h = img.size
            mode = img.mode
    except (FileNotFoundError, UnidentifiedImageError, OSError) as exc:
        return _failure(exc)
    return {
        "success": True,
        "width": w,
        "height": h,
        "mode": mode,
        "capacity_chars": capacity_chars(w, h),
    }
