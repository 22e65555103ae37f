# errors.py
"""Exceptions raised while converting images for the OLED display."""


class OledError(Exception):
    """Base class for all conversion errors. A failed conversion produces no output."""


class InvalidDimensions(OledError):
    """The raster is not exactly 64x32 RGBA."""


class InvalidBufferSize(OledError):
    """A packed buffer's length does not match the selected mode."""


class InvalidMode(OledError):
    """The display mode is not one of USB, BT or BT_SCRAMBLED."""


class DecodeInputMalformed(OledError):
    """Stored input (base64 text, raw file or image file) could not be decoded."""
