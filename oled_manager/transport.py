# transport.py
"""
Moves finished images to the device, or to and from portable encodings.

The Wacom kernel driver exposes each button's OLED as a sysfs attribute
(e.g. /sys/bus/usb/drivers/wacom/3-1.2:1.0/wacom_led/button0_rawimg) that
accepts one complete image per write. A regular file works just as well for
saving images to send later.
"""
import base64
import binascii

from . import config
from .config import Mode
from .errors import DecodeInputMalformed


class DeviceWriter:
    """Writes complete images to an OLED device node or a file."""

    def __init__(self, path: str, verbose: bool = True):
        self.path = path
        self.verbose = verbose

    def write_image(self, image: bytes):
        """
        Writes the whole image in a single write.

        The file is opened unbuffered so the driver sees exactly one write of
        the full image, and it is always closed, even on failure.

        Args:
            image (bytes): The scrambled (device order) image.

        Raises:
            OSError: If the path cannot be opened or the write is short.
        """
        with open(self.path, "wb", buffering=0) as f:
            written = f.write(image)
        if written != len(image):
            raise OSError(f"Writing to {self.path} failed: wrote {written} of {len(image)} bytes")
        if self.verbose:
            print(f"--- Wrote {len(image)} bytes to {self.path} ---")


def read_raw_image(path: str, mode) -> bytes:
    """
    Reads a pre-packed image from a binary file.

    Args:
        path (str): The file holding the packed image.
        mode (Mode | str): The mode the image was packed for.

    Returns:
        bytes: The file contents.

    Raises:
        OSError: If the file cannot be read.
        DecodeInputMalformed: If the file size does not match the mode.
    """
    mode = Mode.parse(mode)
    with open(path, "rb") as f:
        data = f.read()
    expected = config.IMAGE_SIZE[mode]
    if len(data) != expected:
        raise DecodeInputMalformed(
            f"Raw image '{path}' must be {expected} bytes for {mode.name} mode, got {len(data)}"
        )
    return data


def is_base64_image(value: str) -> bool:
    """True if the value is an encoded image string rather than a path."""
    return value.startswith(config.BASE64_PREFIX)


def encode_base64(image: bytes) -> str:
    """Returns the image as a printable 'base64:' string."""
    return config.BASE64_PREFIX + base64.b64encode(image).decode("ascii")


def decode_base64(text: str, mode) -> bytes:
    """
    Decodes a 'base64:' string produced by encode_base64().

    Args:
        text (str): The marker followed by standard-alphabet base64.
        mode (Mode | str): The mode the image is expected to be for.

    Returns:
        bytes: The decoded image.

    Raises:
        DecodeInputMalformed: If the marker is missing, the payload is not
                              valid base64, or the length does not match the mode.
    """
    mode = Mode.parse(mode)
    if not is_base64_image(text):
        raise DecodeInputMalformed(f"Encoded image must start with '{config.BASE64_PREFIX}'")
    payload = text[len(config.BASE64_PREFIX):].strip()
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeInputMalformed(f"Invalid base64 image data: {e}") from e
    expected = config.IMAGE_SIZE[mode]
    if len(data) != expected:
        raise DecodeInputMalformed(
            f"Decoded image is {len(data)} bytes, {mode.name} mode needs {expected}"
        )
    return data
