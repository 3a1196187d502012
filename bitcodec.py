# text <-> bits
# every character becomes exactly 16 bits (utf-16 code units, msb first)
# and the whole thing gets a 32-bit header up front saying how many BITS follow
# (bits, not characters!! easy to mix those up)

from errors import DecodeFailure, InvalidInput


HEADER_BITS = 32
BITS_PER_CHAR = 16
MAX_BODY_BITS = (1 << HEADER_BITS) - 1


def _int_to_bits(value: int, width: int) -> list[int]:
    return [(value >> i) & 1 for i in range(width - 1, -1, -1)]


def _bits_to_int(bits: list[int]) -> int:
    value = 0
    for bit in bits:
        value = (value << 1) | bit
    return value


def text_to_bits(text: str) -> list[int]:
    # anything outside the BMP (emojis etc) turns into a surrogate pair = 32 bits
    raw = text.encode("utf-16-be", "surrogatepass")
    bits = []
    for byte in raw:
        bits.extend(_int_to_bits(byte, 8))
    return bits


def bits_to_text(bits: list[int]) -> str:
    if len(bits) % BITS_PER_CHAR:
        raise DecodeFailure(
            f"Bit count {len(bits)} is not a multiple of {BITS_PER_CHAR}."
        )
    raw = bytearray()
    for i in range(0, len(bits), 8):
        raw.append(_bits_to_int(bits[i : i + 8]))
    # surrogatepass so garbage from a wrong key still comes back as a string
    return raw.decode("utf-16-be", "surrogatepass")


def build_payload(message: str) -> list[int]:
    body = text_to_bits(message)
    if len(body) > MAX_BODY_BITS:
        raise InvalidInput("Message is too long for a 32-bit length header.")
    return _int_to_bits(len(body), HEADER_BITS) + body


def parse_payload_length(header_bits: list[int], max_bits: int) -> int:
    """Read the 32-bit big-endian header and sanity-check it.

    max_bits is the image's channel count (width * height * 3). A length
    of zero or anything past that means there's no message we can trust,
    which is usually just the wrong key.
    """
    if len(header_bits) != HEADER_BITS:
        raise DecodeFailure(f"Header must be {HEADER_BITS} bits, got {len(header_bits)}.")
    length = _bits_to_int(header_bits)
    if length < 1 or length > max_bits:
        raise DecodeFailure(f"Header length {length} is outside 1..{max_bits}.")
    return length
