# shared pytest fixtures
# tiny solid-colour carriers - big enough to hide short messages, small enough to be fast

import pytest
from PIL import Image

from stego_engine import PixelBuffer


def solid_buffer(width, height, rgba=(100, 100, 100, 255)):
    return PixelBuffer(width, height, bytes(rgba) * (width * height))


@pytest.fixture
def make_buffer():
    return solid_buffer


@pytest.fixture
def carrier(make_buffer):
    # 200x200 gives plenty of room for the short messages the tests use
    return make_buffer(200, 200)


@pytest.fixture
def carrier_png(tmp_path):
    path = tmp_path / "carrier.png"
    Image.new("RGB", (200, 200), color=(42, 58, 90)).save(path)
    return path
