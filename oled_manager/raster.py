# raster.py
"""
The in-memory RGBA raster passed between the image sources and the encoder.

A raster is only valid at the display's native size. Nothing here resizes or
converts colours; the sources are expected to hand over an exact 64x32 image.
"""
from PIL import Image

from . import config
from .errors import InvalidDimensions


class RasterImage:
    """A row-major RGBA bitmap, 4 bytes per pixel."""

    def __init__(self, width: int, height: int, data: bytes):
        self.width = width
        self.height = height
        self.data = bytes(data)

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        """Builds a raster from a PIL image, converting it to RGBA first."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        width, height = image.size
        return cls(width, height, image.tobytes("raw", "RGBA"))

    @classmethod
    def blank(cls, color: tuple[int, int, int, int] = config.BACKGROUND_COLOR) -> "RasterImage":
        """Returns a display-sized raster filled with a single colour."""
        pixel = bytes(color)
        return cls(config.OLED_WIDTH, config.OLED_HEIGHT, pixel * (config.OLED_WIDTH * config.OLED_HEIGHT))

    def to_pil(self) -> Image.Image:
        self.validate()
        return Image.frombytes("RGBA", (self.width, self.height), self.data)

    def validate(self):
        """
        Checks that the raster has the display's exact geometry.

        Raises:
            InvalidDimensions: If the size is not 64x32, or the pixel data does
                               not hold exactly 4 bytes for every pixel.
        """
        if self.width != config.OLED_WIDTH or self.height != config.OLED_HEIGHT:
            raise InvalidDimensions(
                f"Image must be {config.OLED_WIDTH}x{config.OLED_HEIGHT}, got {self.width}x{self.height}"
            )
        if len(self.data) != config.RASTER_SIZE:
            raise InvalidDimensions(
                f"Expected {config.RASTER_SIZE} bytes of RGBA data, got {len(self.data)}"
            )

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        offset = (y * self.width + x) * config.BYTES_PER_PIXEL
        return tuple(self.data[offset:offset + config.BYTES_PER_PIXEL])

    def __eq__(self, other):
        if not isinstance(other, RasterImage):
            return NotImplemented
        return (self.width, self.height, self.data) == (other.width, other.height, other.data)

    def __repr__(self):
        return f"RasterImage({self.width}x{self.height})"
