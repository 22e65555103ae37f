# encoder.py
"""
Packs 64x32 RGBA rasters into the display's on-wire pixel formats and back.

USB devices take 4-bit grayscale, two pixels per byte. Bluetooth devices take
1-bit monochrome, eight pixels per byte. Both formats sample byte 0 of each
RGBA pixel rather than computing a luma value; existing firmware expects
exactly this quantization.
"""
from . import config
from .config import Mode
from .errors import InvalidBufferSize
from .raster import RasterImage

_BPP = config.BYTES_PER_PIXEL
_ROW_STRIDE = config.OLED_WIDTH * _BPP


def encode(raster: RasterImage, mode) -> bytes:
    """
    Converts a raster into the packed image for the given mode.

    Args:
        raster (RasterImage): A 64x32 RGBA raster.
        mode (Mode | str): The target display mode.

    Returns:
        bytes: 1024 bytes for USB, 256 bytes for the Bluetooth modes.

    Raises:
        InvalidDimensions: If the raster is not exactly 64x32.
        InvalidMode: If the mode is not recognised.
    """
    mode = Mode.parse(mode)
    raster.validate()
    if mode is Mode.USB:
        return _pack_4bit(raster.data)
    return _pack_1bit(raster.data)


def _pack_4bit(data: bytes) -> bytes:
    packed = bytearray(config.USB_IMAGE_SIZE)
    bytes_per_row = config.OLED_WIDTH // 2
    for y in range(config.OLED_HEIGHT):
        row = y * _ROW_STRIDE
        for x in range(bytes_per_row):
            # Byte offsets 0 and 4 of each two-pixel group.
            first = data[row + 8 * x]
            second = data[row + 8 * x + 4]
            packed[bytes_per_row * y + x] = (first & 0xF0) | (second >> 4)
    return bytes(packed)


def _pack_1bit(data: bytes) -> bytes:
    packed = bytearray(config.BT_IMAGE_SIZE)
    bytes_per_row = config.OLED_WIDTH // 8
    for y in range(config.OLED_HEIGHT):
        row = y * _ROW_STRIDE
        for x in range(bytes_per_row):
            value = 0
            for bit in range(8):
                # Pixel 0 of the group lands in bit 7.
                if data[row + (8 * x + bit) * _BPP] & 0x80:
                    value |= 0x80 >> bit
            packed[bytes_per_row * y + x] = value
    return bytes(packed)


def decode(packed: bytes, mode) -> RasterImage:
    """
    Rebuilds a grayscale raster from a packed (unscrambled) image.

    Each pixel's luma is broadcast to the R, G and B channels and alpha is
    fully opaque. USB nibbles expand to n * 17 so that 0xF maps to 0xFF;
    Bluetooth bits expand to 0x00 or 0xFF.

    Args:
        packed (bytes): The packed image, in encoder byte order.
        mode (Mode | str): The mode the image was packed for.

    Returns:
        RasterImage: A 64x32 RGBA raster.

    Raises:
        InvalidBufferSize: If the buffer length does not match the mode.
        InvalidMode: If the mode is not recognised.
    """
    mode = Mode.parse(mode)
    check_size(packed, mode)
    if mode is Mode.USB:
        lumas = []
        for value in packed:
            lumas.append((value >> 4) * 17)
            lumas.append((value & 0x0F) * 17)
    else:
        lumas = [0xFF if value & (0x80 >> bit) else 0x00 for value in packed for bit in range(8)]

    data = bytearray()
    for luma in lumas:
        data.extend((luma, luma, luma, 0xFF))
    return RasterImage(config.OLED_WIDTH, config.OLED_HEIGHT, data)


def check_size(buffer: bytes, mode: Mode):
    """Raises InvalidBufferSize unless the buffer has the mode's fixed length."""
    expected = config.IMAGE_SIZE[mode]
    if len(buffer) != expected:
        raise InvalidBufferSize(
            f"{mode.name} images are {expected} bytes long, got {len(buffer)}"
        )
