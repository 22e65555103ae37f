# image_source.py
"""
Produces display-sized rasters from image files or short text strings.

Images must already be 64x32; they are converted to RGBA but never resized.
Text is drawn white on black, centred, and wrapped onto at most two lines,
which is all the button displays have room for.
"""
from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from . import config
from .errors import DecodeInputMalformed
from .raster import RasterImage


def load_image(path: str) -> RasterImage:
    """
    Opens an image file and converts it to a validated RGBA raster.

    Args:
        path (str): Path to any image format Pillow can read.

    Returns:
        RasterImage: The image as a 64x32 RGBA raster.

    Raises:
        FileNotFoundError: If the file does not exist.
        DecodeInputMalformed: If Pillow cannot decode the file.
        InvalidDimensions: If the image is not exactly 64x32.
    """
    try:
        with Image.open(path) as img:
            raster = RasterImage.from_pil(img)
    except UnidentifiedImageError as e:
        raise DecodeInputMalformed(f"'{path}' is not a readable image: {e}") from e
    raster.validate()
    return raster


def _load_font(font_path: str | None, font_size: int) -> ImageFont.ImageFont:
    """Loads a TrueType font, or Pillow's built-in font at the same size when no path is configured."""
    font_path = font_path or config.FONT_PATH
    if font_path:
        return ImageFont.truetype(font_path, font_size)
    return ImageFont.load_default(size=font_size)


def _wrap_text(text: str) -> list[str]:
    """
    Splits text into display lines on whitespace.

    Words are packed greedily into lines of up to TEXT_MAX_LINE_CHARS
    characters. A single word longer than that is kept whole. Anything past
    TEXT_MAX_LINES is joined onto the last line and left to be clipped.
    """
    lines = []
    for word in text.split():
        if lines and len(lines[-1]) + 1 + len(word) <= config.TEXT_MAX_LINE_CHARS:
            lines[-1] += " " + word
        elif len(lines) < config.TEXT_MAX_LINES:
            lines.append(word)
        else:
            lines[-1] += " " + word
    return lines


def render_text(text: str, font_path: str | None = None, font_size: int | None = None) -> RasterImage:
    """
    Rasterizes a short label onto a display-sized canvas.

    Args:
        text (str): The label. Empty text yields a blank (black) image.
        font_path (str, optional): A TrueType font file. Defaults to
                                   config.FONT_PATH, then Pillow's default font.
        font_size (int, optional): Font size in points. Defaults to
                                   config.TEXT_FONT_SIZE.

    Returns:
        RasterImage: A 64x32 RGBA raster.

    Raises:
        OSError: If the font file cannot be opened.
        ValueError: If the font size is not positive.
    """
    if font_size is None:
        font_size = config.TEXT_FONT_SIZE
    if font_size <= 0:
        raise ValueError(f"Font size must be greater than 0, got {font_size}")
    font = _load_font(font_path, font_size)
    image = Image.new("RGBA", (config.OLED_WIDTH, config.OLED_HEIGHT), config.BACKGROUND_COLOR)
    draw = ImageDraw.Draw(image)

    lines = _wrap_text(text)
    if not lines:
        return RasterImage.from_pil(image)

    # Measure every line first so the block can be centred vertically.
    sizes = []
    for line in lines:
        bbox = draw.textbbox((0, 0), line, font=font)
        sizes.append((bbox[2] - bbox[0], bbox[3] - bbox[1], bbox[0], bbox[1]))
    block_height = sum(h for _, h, _, _ in sizes) + config.TEXT_LINE_SPACING * (len(lines) - 1)

    y = (config.OLED_HEIGHT - block_height) // 2
    for line, (width, height, left, top) in zip(lines, sizes):
        x = (config.OLED_WIDTH - width) // 2
        draw.text((x - left, y - top), line, font=font, fill=config.TEXT_COLOR)
        y += height + config.TEXT_LINE_SPACING

    return RasterImage.from_pil(image)


def save_preview(raster: RasterImage, path: str):
    """Writes a raster to an image file; the format follows the file extension."""
    raster.to_pil().save(path)
