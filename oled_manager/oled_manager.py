# oled_manager.py
"""
Command-line tool that sets the OLED button icons on Intuos4 tablets.

It performs the following tasks:
1.  Obtains a 64x32 image, either from an image file, from rendered text,
    from a pre-packed raw file, or from a 'base64:' string.
2.  Packs it into the format of the selected transport (USB 4-bit grayscale
    or Bluetooth 1-bit monochrome).
3.  Scrambles it into the byte order the device firmware expects.
4.  Writes it to the button's sysfs entry, prints it as a 'base64:' string,
    and/or saves a decoded preview image.
"""
import argparse
import sys

from . import __version__, config
from .config import Mode
from .encoder import check_size, decode, encode
from .errors import OledError
from .image_source import load_image, render_text, save_preview
from .raster import RasterImage
from .scrambler import scramble, unscramble
from .transport import DeviceWriter, decode_base64, encode_base64, is_base64_image, read_raw_image


def scramble_applies(mode, scramble_usb: bool = config.SCRAMBLE_USB) -> bool:
    """True if images for this mode leave the tool in scrambled order."""
    mode = Mode.parse(mode)
    if mode is Mode.USB:
        return scramble_usb
    return mode is Mode.BT_SCRAMBLED


def prepare_packed(packed: bytes, mode, scramble_usb: bool = config.SCRAMBLE_USB) -> bytes:
    """
    Applies the scramble policy to an already packed image.

    Raises:
        InvalidBufferSize: If the buffer length does not match the mode.
    """
    mode = Mode.parse(mode)
    if mode is Mode.USB and not scramble_usb:
        check_size(packed, mode)
        return bytes(packed)
    return scramble(packed, mode)


def convert(raster: RasterImage, mode, scramble_usb: bool = config.SCRAMBLE_USB) -> bytes:
    """
    Runs the full pipeline on a raster: pack, then scramble.

    Args:
        raster (RasterImage): A 64x32 RGBA raster.
        mode (Mode | str): The display mode, shared by both steps.
        scramble_usb (bool): Whether USB images are scrambled here rather
                             than by the kernel driver.

    Returns:
        bytes: The image in device order, ready to write.

    Raises:
        InvalidDimensions: If the raster is not exactly 64x32.
        InvalidMode: If the mode is not recognised.
    """
    mode = Mode.parse(mode)
    return prepare_packed(encode(raster, mode), mode, scramble_usb)


def _positive_int(value: str) -> int:
    """argparse type for sizes that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oled-manager",
        description="Sets OLED button icons on Intuos4 tablets.",
        epilog="The device is the button's sysfs entry, e.g. "
               "/sys/bus/usb/drivers/wacom/3-1.2:1.0/wacom_led/button0_rawimg",
    )
    parser.add_argument("image", nargs="?",
                        help="64x32 image file, raw packed file (with --raw) or a 'base64:' string")
    parser.add_argument("-t", "--text", help="render this text instead of reading an image")
    parser.add_argument("--font", help="TrueType font used with --text")
    parser.add_argument("--font-size", type=_positive_int, help="font size used with --text")
    parser.add_argument("--raw", action="store_true",
                        help="IMAGE is an already packed binary file of the mode's size")

    modes = parser.add_mutually_exclusive_group()
    modes.add_argument("--usb", dest="mode", action="store_const", const=Mode.USB,
                       help="4-bit grayscale for USB-connected tablets (default)")
    modes.add_argument("--bt", dest="mode", action="store_const", const=Mode.BT,
                       help="1-bit monochrome for Bluetooth, unscrambled")
    modes.add_argument("--bt-scramble", dest="mode", action="store_const", const=Mode.BT_SCRAMBLED,
                       help="1-bit monochrome for Bluetooth, scrambled for the Intuos4 WL firmware")
    parser.set_defaults(mode=Mode.USB)

    parser.add_argument("--no-scramble", action="store_true",
                        help="do not scramble USB images (for kernels that scramble in the driver)")
    parser.add_argument("-d", "--device", help="device node or file to write the image to")
    parser.add_argument("--base64", action="store_true", help="print the image as a 'base64:' string (implies --quiet)")
    parser.add_argument("--preview", help="save the decoded image to this file (e.g. preview.png)")
    parser.add_argument("-q", "--quiet", action="store_true", help="only print errors")
    parser.add_argument("-V", "--version", action="version", version=__version__)
    return parser


def _load_output(args) -> tuple[bytes, bool]:
    """
    Produces the device-order image requested on the command line.

    Returns:
        tuple: (image, scrambled) where scrambled tells whether the image is in
               scrambled order and must be unscrambled for a preview.
    """
    mode = args.mode
    scramble_usb = not args.no_scramble
    scrambled = scramble_applies(mode, scramble_usb)

    if args.text is not None:
        raster = render_text(args.text, args.font, args.font_size)
        return convert(raster, mode, scramble_usb), scrambled
    if is_base64_image(args.image):
        # Encoded strings are stored in device order already.
        return decode_base64(args.image, mode), scrambled
    if args.raw:
        return prepare_packed(read_raw_image(args.image, mode), mode, scramble_usb), scrambled
    return convert(load_image(args.image), mode, scramble_usb), scrambled


def main(argv=None) -> int:
    """
    Main execution function.

    Returns:
        int: 0 on success, 1 if the conversion or any I/O failed.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.image is None) == (args.text is None):
        parser.error("give exactly one of IMAGE or --text")
    if not (args.device or args.base64 or args.preview):
        parser.error("nothing to do: give --device, --base64 and/or --preview")
    # Keep stdout clean for the encoded string.
    quiet = args.quiet or args.base64

    try:
        if not quiet:
            print(f"--- Mode: {args.mode.name} ---")
        image, scrambled = _load_output(args)

        if args.preview:
            packed = unscramble(image, args.mode) if scrambled else image
            save_preview(decode(packed, args.mode), args.preview)
            if not quiet:
                print(f"--- Saved preview to {args.preview} ---")
        if args.device:
            DeviceWriter(args.device, verbose=not quiet).write_image(image)
        if args.base64:
            print(encode_base64(image))
    except FileNotFoundError as e:
        print(f"\n❌ Error: File not found: {e.filename}", file=sys.stderr)
        return 1
    except (OledError, OSError) as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
