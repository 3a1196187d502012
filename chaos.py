# the chaos part of the project
# the key never encrypts anything - it decides WHERE the bits go
# we squash the key into a starting value, then run the logistic map
# x -> r*x*(1-x) over and over and turn each output into a pixel coordinate
#
# NOTE: every float op here has to happen in exactly this order
# (r * x) * (1 - x) so the same key picks the same pixels on every machine

from typing import NamedTuple

from errors import InvalidInput, SequencerSaturated


CHAOS_R = 3.9          # logistic map parameter, well inside the chaotic range
BURN_IN = 100          # iterations thrown away before the seed is used
KEY_MULTIPLIER = 17
KEY_MODULUS = 1000
FALLBACK_STATE = 0.5   # used whenever the state lands on 0 or 1
CHANNELS = 3           # r, g, b - alpha is never touched
MAX_ATTEMPTS_PER_DRAW = 100_000


class Location(NamedTuple):
    x: int
    y: int
    channel: int


def logistic(x: float) -> float:
    return CHAOS_R * x * (1 - x)


def key_code_units(key: str) -> list[int]:
    # keys are read as utf-16 code units, so an emoji counts as two "characters"
    # surrogatepass lets lone surrogates through instead of blowing up
    raw = key.encode("utf-16-be", "surrogatepass")
    return [(raw[i] << 8) | raw[i + 1] for i in range(0, len(raw), 2)]


def derive_seed(key: str) -> float:
    """Turn a secret key into a logistic-map state in (0, 1).

    Same key always gives the same seed. Changing one character usually
    sends the value somewhere completely different after the burn-in.
    """
    if not key:
        raise InvalidInput("Key cannot be empty.")

    value = 0
    for unit in key_code_units(key):
        value += unit
        value = (value * KEY_MULTIPLIER) % KEY_MODULUS

    state = value / KEY_MODULUS
    if state <= 0 or state >= 1:
        state = FALLBACK_STATE

    for _ in range(BURN_IN):
        state = logistic(state)
    return state


class ChaosSequencer:
    """
    Hands out distinct (x, y, channel) locations for one image.

    The set of locations already handed out lives as long as the instance,
    so two calls to generate_sequence() never return the same spot twice.
    Don't share an instance between separate encode/decode calls.
    """

    def __init__(self, seed: float, width: int, height: int,
                 max_attempts: int = MAX_ATTEMPTS_PER_DRAW):
        if width <= 0 or height <= 0:
            raise InvalidInput(f"Image dimensions must be positive, got {width}x{height}.")
        if not 0 < seed < 1:
            raise InvalidInput(f"Seed must be inside (0, 1), got {seed!r}.")
        self.width = width
        self.height = height
        self.max_attempts = max_attempts
        self._state = seed
        self._used: set[Location] = set()

    @classmethod
    def from_key(cls, key: str, width: int, height: int, **kwargs) -> "ChaosSequencer":
        return cls(derive_seed(key), width, height, **kwargs)

    @property
    def capacity(self) -> int:
        return self.width * self.height * CHANNELS

    @property
    def used(self) -> int:
        return len(self._used)

    def next(self) -> float:
        self._state = logistic(self._state)
        # rounding right at the edges could pin the map to 0 forever, so bail out to 0.5
        if self._state <= 0 or self._state >= 1:
            self._state = FALLBACK_STATE
        return self._state

    def next_index(self, bound: int) -> int:
        return int(self.next() * bound)

    def _draw(self) -> Location:
        return Location(
            self.next_index(self.width),
            self.next_index(self.height),
            self.next_index(CHANNELS),
        )

    def generate_sequence(self, count: int) -> list[Location]:
        # rejection sampling: keep drawing until we get a spot we haven't used yet
        # gets slow as the image fills up, so we cap the retries per location
        if count < 0:
            raise InvalidInput(f"Location count cannot be negative, got {count}.")
        if self.used + count > self.capacity:
            raise SequencerSaturated(
                f"Asked for {count} locations but only {self.capacity - self.used} "
                f"of {self.capacity} are still free."
            )

        sequence = []
        for _ in range(count):
            attempts = 0
            location = self._draw()
            while location in self._used:
                attempts += 1
                if attempts >= self.max_attempts:
                    raise SequencerSaturated(
                        f"No fresh location after {attempts} draws "
                        f"({self.used} of {self.capacity} already used)."
                    )
                location = self._draw()
            self._used.add(location)
            sequence.append(location)
        return sequence
