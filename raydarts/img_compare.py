"""Compare a test image to a reference image and report their difference."""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Sequence

import numpy as np

from .common import LOGGER_NAME, DartsError, darts_init
from .image import load_image, savable_formats, save_image

__all__ = ["compare_images", "main"]

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


def compare_images(test, reference, multiplier: float = 1.0) -> tuple[np.ndarray, np.ndarray, float]:
    """Compare two images of equal resolution.

    Returns ``(diff, mad, scalar_mad)``: the absolute difference image scaled by
    ``multiplier``, the per-channel mean absolute difference, and its channel average.
    """
    test = np.asarray(test, dtype=np.float64)
    reference = np.asarray(reference, dtype=np.float64)
    if test.shape[:2] != reference.shape[:2]:
        raise DartsError(
            f"Test image ({test.shape[1]}x{test.shape[0]}) and reference image "
            f"({reference.shape[1]}x{reference.shape[0]}) resolutions don't match!"
        )
    d = np.abs(test[..., :3] - reference[..., :3])
    mad = d.reshape(-1, 3).mean(axis=0)
    scalar_mad = float(mad.sum() / 3.0)
    return d * multiplier, mad, scalar_mad


def _existing_file(value: str) -> str:
    if not os.path.isfile(value):
        raise argparse.ArgumentTypeError(f"File does not exist: {value}")
    return value


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"Value {value} is not a number") from error
    if not number > 0:
        raise argparse.ArgumentTypeError(f"Value {value} must be positive")
    return number


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="img_compare",
        description=(
            "Compares a test image to a reference image, outputs the difference, and exits with failure or "
            "success depending on whether the difference is above a threshold."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "-o",
        "--outfile",
        default="",
        help=f"Specify the output image filename (extension must be one of: {', '.join(savable_formats())})",
    )
    parser.add_argument(
        "-m", "--multiplier", type=_positive_float, default=1.0,
        help="The amount to multiply the difference image by.",
    )
    parser.add_argument(
        "-t", "--threshold", type=_positive_float, default=2 / 255.0,
        help="The rmse threshold above which the images are considered different.",
    )
    parser.add_argument("test_img", type=_existing_file, help="The filename of a test image")
    parser.add_argument("ref_img", type=_existing_file, help="The filename of a reference image")
    parser.add_argument("-v", "--verbosity", type=int, default=2, choices=range(7), help=_VERBOSITY_HELP)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the image comparison command; returns 0 if the images match, 1 otherwise."""
    args = _parser().parse_args(argv)
    darts_init(args.verbosity)
    try:
        _log.info(
            "Comparing\n   test image:      %s\n   reference image: %s", args.test_img, args.ref_img
        )
        try:
            test = load_image(args.test_img)
        except DartsError as error:
            raise DartsError("Cannot load test image!") from error
        try:
            reference = load_image(args.ref_img)
        except DartsError as error:
            raise DartsError("Cannot load reference image!") from error

        diff, mad, scalar_mad = compare_images(test, reference, args.multiplier)
        _log.info("Mean Absolute Difference: %s", mad.tolist())
        _log.info("Average of MAD across color channels: %s", scalar_mad)

        if args.outfile:
            _log.info("Writing difference image to '%s'.", args.outfile)
            save_image(args.outfile, diff)

        if scalar_mad > args.threshold:
            raise DartsError("Images don't match!")
    except (DartsError, ValueError, OSError) as error:
        _log.error("%s", error)
        return 1

    _log.info("Images match!")
    return 0