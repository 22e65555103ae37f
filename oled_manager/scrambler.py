# scrambler.py
"""
Reorders packed images into the byte and bit order each firmware expects.

USB devices scan every pair of rows right to left with the two rows' nibbles
interleaved. The Bluetooth Intuos4 WL wants each 8-byte block reversed and
then the bits of byte pairs 8 apart interleaved ("76543210 HGFEDCBA" becomes
"GECA6420 HFDB7531" across the two output bytes). Plain BT mode sends the
packed image untouched.

The index arithmetic below is the device contract. Do not simplify it.
"""
from .config import Mode
from .encoder import check_size

_USB_GROUP = 64
_USB_GROUPS = 16
_BT_BLOCK = 8
_BT_BLOCKS = 32


def scramble(packed: bytes, mode) -> bytes:
    """
    Scrambles a packed image for writing to the device.

    Args:
        packed (bytes): The packed image (1024 bytes for USB, 256 for BT).
        mode (Mode | str): The display mode.

    Returns:
        bytes: A new buffer of the same length.

    Raises:
        InvalidBufferSize: If the buffer length does not match the mode.
        InvalidMode: If the mode is not recognised.
    """
    mode = Mode.parse(mode)
    check_size(packed, mode)
    if mode is Mode.USB:
        return _scramble_usb(packed)
    if mode is Mode.BT_SCRAMBLED:
        return _interleave_bits(_reverse_blocks(packed))
    return bytes(packed)


def unscramble(scrambled: bytes, mode) -> bytes:
    """Inverse of scramble(); recovers the packed image from device order."""
    mode = Mode.parse(mode)
    check_size(scrambled, mode)
    if mode is Mode.USB:
        return _unscramble_usb(scrambled)
    if mode is Mode.BT_SCRAMBLED:
        return _reverse_blocks(_deinterleave_bits(scrambled))
    return bytes(scrambled)


def _scramble_usb(buf: bytes) -> bytes:
    image = bytearray(len(buf))
    for y in range(_USB_GROUPS):
        base = _USB_GROUP * y
        for x in range(32):
            low = buf[base + 31 - x]
            high = buf[base + 63 - x]
            image[base + 2 * x] = (0xF0 & (high << 4)) | (0x0F & low)
            image[base + 2 * x + 1] = (0xF0 & high) | (0x0F & (low >> 4))
    return bytes(image)


def _unscramble_usb(image: bytes) -> bytes:
    buf = bytearray(len(image))
    for y in range(_USB_GROUPS):
        base = _USB_GROUP * y
        for x in range(32):
            even = image[base + 2 * x]
            odd = image[base + 2 * x + 1]
            buf[base + 31 - x] = (0x0F & even) | (0xF0 & (odd << 4))
            buf[base + 63 - x] = (0x0F & (even >> 4)) | (0xF0 & odd)
    return bytes(buf)


def _reverse_blocks(image: bytes) -> bytes:
    # Self-inverse.
    buf = bytearray(len(image))
    for x in range(_BT_BLOCKS):
        for y in range(_BT_BLOCK):
            buf[_BT_BLOCK * x + (7 - y)] = image[_BT_BLOCK * x + y]
    return bytes(buf)


def _spread(value: int) -> int:
    """Moves bit w of an 8-bit value to bit 2w of a 16-bit value."""
    result = 0
    for w in range(8):
        result |= ((value >> w) & 1) << (2 * w)
    return result


def _gather(value: int) -> int:
    """Inverse of _spread: collects the even bits of a 16-bit value."""
    result = 0
    for w in range(8):
        result |= ((value >> (2 * w)) & 1) << w
    return result


def _interleave_bits(buf: bytes) -> bytes:
    image = bytearray(len(buf))
    for x in range(4):
        for y in range(4):
            for z in range(8):
                i = (x << 6) + (y << 4) + z
                r = _spread(buf[i]) | (_spread(buf[i + 8]) << 1)
                o = (x << 6) + (y << 4) + (z << 1)
                image[o] = r & 0xFF
                image[o + 1] = (r >> 8) & 0xFF
    return bytes(image)


def _deinterleave_bits(image: bytes) -> bytes:
    buf = bytearray(len(image))
    for x in range(4):
        for y in range(4):
            for z in range(8):
                o = (x << 6) + (y << 4) + (z << 1)
                r = image[o] | (image[o + 1] << 8)
                i = (x << 6) + (y << 4) + z
                buf[i] = _gather(r)
                buf[i + 8] = _gather(r >> 1)
    return bytes(buf)
