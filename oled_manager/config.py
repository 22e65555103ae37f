# config.py
"""
Configuration for the OLED image manager.

The values in this file are tied to the Intuos4 OLED button displays and the
firmware that drives them. Change them only if the device itself changes.
"""
import enum
import os

from .errors import InvalidMode


class Mode(enum.Enum):
    """Transport/firmware variant; selects packing density and scramble order."""
    USB = "usb"
    BT = "bt"
    BT_SCRAMBLED = "bt_scrambled"

    @classmethod
    def parse(cls, value) -> "Mode":
        """
        Resolves a mode from a Mode member or its name.

        Args:
            value (Mode | str): The mode, or a name such as "usb", "bt",
                                "bt_scrambled" or "bt-scrambled".

        Returns:
            Mode: The matching mode.

        Raises:
            InvalidMode: If the value names no known mode.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            for mode in cls:
                if mode.value == key:
                    return mode
        raise InvalidMode(f"Unknown display mode: {value!r}")


# -- Display Geometry --
OLED_WIDTH = 64
OLED_HEIGHT = 32
BYTES_PER_PIXEL = 4  # RGBA, 8 bits per channel
RASTER_SIZE = OLED_WIDTH * OLED_HEIGHT * BYTES_PER_PIXEL

# -- Packed Image Sizes --
USB_IMAGE_SIZE = OLED_WIDTH * OLED_HEIGHT // 2  # 4 bits per pixel
BT_IMAGE_SIZE = OLED_WIDTH * OLED_HEIGHT // 8   # 1 bit per pixel
IMAGE_SIZE = {
    Mode.USB: USB_IMAGE_SIZE,
    Mode.BT: BT_IMAGE_SIZE,
    Mode.BT_SCRAMBLED: BT_IMAGE_SIZE,
}

# Older kernels expect the tool to scramble USB images; newer ones can do it
# in the driver, in which case pass --no-scramble.
SCRAMBLE_USB = True

# -- Portable Encoding --
BASE64_PREFIX = "base64:"

# -- Text Rendering --
TEXT_MAX_LINES = 2
TEXT_MAX_LINE_CHARS = 10
TEXT_FONT_SIZE = 12
TEXT_LINE_SPACING = 2
TEXT_COLOR = (255, 255, 255, 255)
BACKGROUND_COLOR = (0, 0, 0, 255)
# A TrueType font used when --font is not given. Falls back to Pillow's
# built-in bitmap font when unset.
FONT_PATH = os.environ.get("OLED_MANAGER_FONT")
