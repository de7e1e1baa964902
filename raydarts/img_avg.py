"""Average a sequence of images and save the result to a new file."""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Sequence

import numpy as np

from .common import LOGGER_NAME, DartsError, darts_init
from .image import load_image, savable_formats, save_image

__all__ = ["average_images", "main"]

_log = logging.getLogger(LOGGER_NAME)

_VERBOSITY_HELP = """Set verbosity threshold T with lower values meaning more verbose
and higher values removing low-priority messages. All messages with
severity >= T are displayed, where the severities are:
    trace    = 0
    debug    = 1
    info     = 2
    warn     = 3
    err      = 4
    critical = 5
    off      = 6
The default is 2 (info)."""


def average_images(filenames: Sequence) -> np.ndarray:
    """Load every image in ``filenames`` and return their per-pixel average.

    All images must share the resolution of the first one.
    """
    if not filenames:
        raise DartsError("No images to average.")

    first = load_image(filenames[0])
    total = np.zeros(first.shape, dtype=np.float64)
    for index, filename in enumerate(filenames):
        image = first if index == 0 else load_image(filename)
        if image.shape[:2] != total.shape[:2]:
            raise DartsError(
                f'Image dimensions don\'t match. "{filenames[0]}" : '
                f"({total.shape[1]}x{total.shape[0]}) vs. \"{filename}\" "
                f"({image.shape[1]}x{image.shape[0]})."
            )
        total += image
    return (total / len(filenames)).astype(np.float32)


def _existing_file(value: str) -> str:
    if not os.path.isfile(value):
        raise argparse.ArgumentTypeError(f"File does not exist: {value}")
    return value


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="img_avg",
        description="Average a sequence of images and save the result to a new file.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "-o",
        "--outfile",
        default="",
        help=f"Specify the output image filename (extension must be one of: {', '.join(savable_formats())})",
    )
    parser.add_argument("infiles", nargs="+", type=_existing_file, help="The files to read in and average.")
    parser.add_argument("-v", "--verbosity", type=int, default=2, choices=range(7), help=_VERBOSITY_HELP)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the image averaging command; returns the process exit status."""
    args = _parser().parse_args(argv)
    darts_init(args.verbosity)
    try:
        _log.info("Averaging %d images.", len(args.infiles))
        average = average_images(args.infiles)
        if args.outfile:
            _log.info("Writing average image to '%s'.", args.outfile)
            save_image(args.outfile, average)
    except (DartsError, ValueError, OSError) as error:
        _log.error("%s", error)
        return 1
    return 0