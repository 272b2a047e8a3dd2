"""
Command-line interface for summarizing ImageScope annotation XML files.

Uses the `process_annotation_folder()` function defined in `batch.py`.

Example usage:
    imagescope-positivity ./data/annotations > summary.csv
"""

import argparse
import logging
import os
import sys

from .batch import SLIDE_EXT, process_annotation_folder
from .io import list_xml_files

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Summarize ImageScope annotation XML files as CSV: one row per drawn region "
                    "with its label and positive pixel count statistics."
    )

    parser.add_argument(
        "search_path",
        nargs="?",
        default=None,
        help="Folder containing the annotation XML files. "
             "Defaults to the folder holding this program."
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the CSV to this file instead of standard output."
    )
    parser.add_argument(
        "--slide-ext",
        default=SLIDE_EXT,
        help=f"Extension of the slide files named in the 'Slide Name' column (default: {SLIDE_EXT})."
    )
    parser.add_argument(
        "--image-location",
        action="store_true",
        help="Add a column with the image file recorded by the analysis for each region."
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Report progress (-v) or debugging details (-vv) on standard error."
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only report errors."
    )
    return parser


def _log_level(args):
    if args.quiet:
        return logging.ERROR
    if args.verbose >= 2:
        return logging.DEBUG
    if args.verbose == 1:
        return logging.INFO
    return logging.WARNING


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=_log_level(args), format="%(levelname)s: %(message)s", stream=sys.stderr)

    search_path = args.search_path
    if search_path is None:
        search_path = os.path.dirname(os.path.abspath(sys.argv[0]))

    try:
        list_xml_files(search_path)
    except OSError as e:
        logger.error(f"Invalid search path {search_path}: {e}")
        return 1

    if args.output:
        try:
            out = open(args.output, "w", newline="")
        except OSError as e:
            logger.error(f"Cannot open output file {args.output}: {e}")
            return 1
    else:
        out = sys.stdout

    try:
        process_annotation_folder(
            search_path, out=out, slide_ext=args.slide_ext, include_image_location=args.image_location
        )
    except OSError as e:
        logger.error(f"Cannot write CSV output: {e}")
        return 1
    finally:
        if out is not sys.stdout:
            out.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
