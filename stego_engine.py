"""
Hide / reveal core.

Works on raw RGBA pixel buffers only. Loading and saving actual image files
lives in steganography.py, this module never touches the disk.
"""

from dataclasses import dataclass

from bitcodec import (
    BITS_PER_CHAR,
    HEADER_BITS,
    bits_to_text,
    build_payload,
    parse_payload_length,
)
from chaos import CHANNELS, ChaosSequencer, Location
from errors import CapacityExceeded, DecodeFailure, InvalidInput, SequencerSaturated


BYTES_PER_PIXEL = 4  # r, g, b, a


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major RGBA bytes, 4 per pixel, stride = width * 4."""

    width: int
    height: int
    data: bytes

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidInput(f"Image dimensions must be positive, got {self.width}x{self.height}.")
        expected = self.width * self.height * BYTES_PER_PIXEL
        if len(self.data) != expected:
            raise InvalidInput(
                f"Pixel buffer holds {len(self.data)} bytes, "
                f"expected {expected} for {self.width}x{self.height} RGBA."
            )

    def offset(self, location: Location) -> int:
        return (location.y * self.width + location.x) * BYTES_PER_PIXEL + location.channel


def capacity_bits(width: int, height: int) -> int:
    # one bit per r/g/b channel
    return width * height * CHANNELS


def capacity_chars(width: int, height: int) -> int:
    return max((capacity_bits(width, height) - HEADER_BITS) // BITS_PER_CHAR, 0)


def encode(buffer: PixelBuffer, message: str, key: str) -> PixelBuffer:
    """Hide `message` in a copy of `buffer` at key-chosen locations.

    Raises InvalidInput for an empty message/key and CapacityExceeded when
    the payload (header included) doesn't fit. The caller's buffer is
    never modified.
    """
    if not message:
        raise InvalidInput("Message cannot be empty.")
    if not key:
        raise InvalidInput("Key cannot be empty.")

    sequencer = ChaosSequencer.from_key(key, buffer.width, buffer.height)
    payload = build_payload(message)
    total_bits = len(payload)
    available = capacity_bits(buffer.width, buffer.height)
    if total_bits > available:
        raise CapacityExceeded(
            f"Message too large! Payload needs {total_bits} bits "
            f"but the image only has {available}."
        )

    # header + body in ONE call so none of them share a channel
    locations = sequencer.generate_sequence(total_bits)

    out = bytearray(buffer.data)
    for location, bit in zip(locations, payload):
        idx = buffer.offset(location)
        out[idx] = (out[idx] & 0xFE) | bit  # flip just the last bit
    return PixelBuffer(buffer.width, buffer.height, bytes(out))


def _read_bits(buffer: PixelBuffer, locations: list[Location]) -> list[int]:
    data = buffer.data
    return [data[buffer.offset(location)] & 1 for location in locations]


def decode(buffer: PixelBuffer, key: str) -> str:
    """Pull the hidden message back out with the same key.

    A wrong key (or an image with nothing in it) raises DecodeFailure,
    which callers should treat as "no message here", not as a crash.
    """
    if not key:
        raise InvalidInput("Key cannot be empty.")

    available = capacity_bits(buffer.width, buffer.height)
    if available < HEADER_BITS:
        raise DecodeFailure("Image is too small to hold a message header.")

    sequencer = ChaosSequencer.from_key(key, buffer.width, buffer.height)
    try:
        header = _read_bits(buffer, sequencer.generate_sequence(HEADER_BITS))
        length = parse_payload_length(header, available)
        if length % BITS_PER_CHAR:
            raise DecodeFailure(
                f"Header length {length} is not a multiple of {BITS_PER_CHAR}."
            )
        # same sequencer keeps going, so the body can't land on a header spot
        body = _read_bits(buffer, sequencer.generate_sequence(length))
    except SequencerSaturated as exc:
        raise DecodeFailure(f"No valid hidden message found ({exc.message})") from exc

    return bits_to_text(body)
