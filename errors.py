# all the ways the hide/reveal core can fail
# every error has a short `code` string so the cli / server can tell them apart
# without string-matching the message


class StegoError(Exception):
    code = "stego_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(StegoError):
    # empty key, empty message, or a pixel buffer whose size doesn't add up
    code = "invalid_input"


class CapacityExceeded(StegoError):
    # payload needs more bits than the image has r/g/b channels
    code = "capacity_exceeded"


class SequencerSaturated(CapacityExceeded):
    # the location generator ran out of fresh (x, y, channel) spots
    # (or gave up after too many repeats in a row)
    code = "sequencer_saturated"


class DecodeFailure(StegoError):
    # wrong key or an image with nothing hidden in it - totally normal outcome
    code = "decode_failure"
