import random

import pytest

from oled_manager import config
from oled_manager.raster import RasterImage


def make_raster(red_for, width=config.OLED_WIDTH, height=config.OLED_HEIGHT):
    """Builds a raster whose byte 0 of pixel (x, y) is red_for(x, y)."""
    data = bytearray()
    for y in range(height):
        for x in range(width):
            # Green and blue are set to something else to show they are ignored.
            data.extend((red_for(x, y), 0x5A, 0xA5, 0xFF))
    return RasterImage(width, height, data)


@pytest.fixture
def random_raster():
    rng = random.Random(1234)
    values = [[rng.randrange(256) for _ in range(config.OLED_WIDTH)] for _ in range(config.OLED_HEIGHT)]
    return make_raster(lambda x, y: values[y][x])


@pytest.fixture
def random_buffer():
    def _make(size, seed=99):
        rng = random.Random(seed)
        return bytes(rng.randrange(256) for _ in range(size))
    return _make


class ShortWriteStream:
    """A raw binary stream that always accepts one byte less than asked."""

    def __init__(self, *args, **kwargs):
        self.written = b""

    def write(self, data):
        self.written = bytes(data[:-1])
        return len(data) - 1

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def short_write(monkeypatch):
    monkeypatch.setattr("oled_manager.transport.open", ShortWriteStream, raising=False)
