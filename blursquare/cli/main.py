#!/usr/bin/env python3
"""
blursquare command line entry point.

Reads an image from a file or the clipboard, frames it in a square with a
blurred background, and writes the result to a file or the clipboard.
"""
import argparse
import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from .. import __version__
from ..errors import BlurSquareError, ConfigurationError, UserDeclinedOverwrite
from ..pipeline.square_pipeline import make_square, DEFAULT_INTENSITY
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="blursquare",
        description="A tool to create a square frame with a blurred background for any image, "
                    "to match the aspect ratio 1:1",
    )
    ap.add_argument("-i", "--input-path", default=None,
                    help="Input file path, defaults to clipboard")
    ap.add_argument("-o", "--output-path", default=None,
                    help="Output file path, defaults to clipboard")
    ap.add_argument("-b", "--blur-intensity", type=float, default=None,
                    help=f"Blur radius of the background (default: env BLUR_INTENSITY or {DEFAULT_INTENSITY})")
    ap.add_argument("-v", "--verbose", action="store_true",
                    help="Debug logging")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def configure_logging(verbose: bool = False) -> None:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def resolve_intensity(cli_value: float = None) -> float:
    """Command line wins, then BLUR_INTENSITY, then the built-in default."""
    if cli_value is not None:
        return cli_value
    raw = os.getenv("BLUR_INTENSITY")
    if not raw:
        return DEFAULT_INTENSITY
    try:
        return float(raw)
    except ValueError as err:
        raise ConfigurationError(f"BLUR_INTENSITY must be a number, got {raw!r}") from err


def run(args: argparse.Namespace, image_service: ImageService = None) -> None:
    intensity = resolve_intensity(args.blur_intensity)
    image_service = image_service or ImageService()
    image = image_service.open_image(args.input_path)
    final_image = make_square(image, intensity)
    image_service.save_image(final_image, args.output_path)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        run(args)
    except UserDeclinedOverwrite as declined:
        print(declined)
        sys.exit(0)
    except BlurSquareError as err:
        logger.error(f"ERROR: {err}")
        sys.exit(1)
    return 0


if __name__ == "__main__":
    main()
