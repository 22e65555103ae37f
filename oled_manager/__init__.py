"""Converts images and text for the OLED button displays of Intuos4 tablets."""

__version__ = "0.4.0"
