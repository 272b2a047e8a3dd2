import logging
import os
import sys

import numpy as np
import pandas as pd

from .io import list_xml_files, read_annotation_xml
from .regions import reconcile_regions

logger = logging.getLogger(__name__)

SLIDE_EXT = ".svs"

COLUMNS = [
    "Filename",
    "Slide Name",
    "Region ID",
    "text label",
    "positivity",
    "num weak positive",
    "num positive",
    "num strong positive",
    "num all positive",
    "num total",
]
NUMERIC_COLUMNS = COLUMNS[4:]
IMAGE_LOCATION_COLUMN = "image location"


def slide_name_for(filename, slide_ext=SLIDE_EXT):
    """Slide file the annotation file belongs to: ``slide1.xml`` -> ``slide1.svs``."""
    stem, _ = os.path.splitext(os.path.basename(filename))
    return stem + slide_ext


def _region_sort_key(region_id):
    # numeric ids in numeric order first, anything else after them
    if region_id.isdecimal():
        try:
            return (0, int(region_id), region_id)
        except ValueError:
            # longer than int() accepts
            pass
    return (1, 0, region_id)


def format_number(value):
    """Text for a CSV cell: ``10`` rather than ``10.0``, ``NaN`` for missing."""
    if value is None or np.isnan(value):
        return "NaN"
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def summarize_regions(filename, regions_info, slide_ext=SLIDE_EXT, include_image_location=False):
    """
    Build the output rows for one annotation file.

    Parameters
    ----------
    filename : str
        Name of the annotation file the regions come from.
    regions_info : dict
        Region id -> RegionInfo, as returned by ``reconcile_regions``.
    slide_ext : str, optional
        Extension of the slide files. Default = ".svs".
    include_image_location : bool, optional
        Append the image file recorded by the analysis for each region.

    Returns
    -------
    rows : pd.DataFrame
        One row per region sorted by region id. Unset positivity is NaN,
        unset counts are 0.
    """
    filename = os.path.basename(filename)
    slide_name = slide_name_for(filename, slide_ext)
    columns = COLUMNS + ([IMAGE_LOCATION_COLUMN] if include_image_location else [])

    rows = []
    for region_id in sorted(regions_info, key=_region_sort_key):
        info = regions_info[region_id]
        row = {
            "Filename": filename,
            "Slide Name": slide_name,
            "Region ID": region_id,
            "text label": (info.text_label or "").strip(),
            "positivity": info.positivity if info.positivity is not None else np.nan,
            "num weak positive": info.num_weak_positive or 0.0,
            "num positive": info.num_positive or 0.0,
            "num strong positive": info.num_strong_positive or 0.0,
            "num all positive": info.num_all_positive,
            "num total": info.num_total or 0.0,
        }
        if include_image_location:
            row[IMAGE_LOCATION_COLUMN] = info.image_location or ""
        rows.append(row)

    return pd.DataFrame(rows, columns=columns)


def write_rows(rows, out, header=False):
    """Write rows as CSV text to the open stream ``out``."""
    formatted = rows.copy()
    for col in NUMERIC_COLUMNS:
        formatted[col] = formatted[col].map(format_number)
    formatted.to_csv(out, index=False, header=header, lineterminator="\n")


def process_annotation_file(xml_path, slide_ext=SLIDE_EXT, include_image_location=False):
    """Read, reconcile and summarize a single annotation file."""
    filename = os.path.basename(xml_path)
    document = read_annotation_xml(xml_path)
    regions_info = reconcile_regions(document, filename)
    return summarize_regions(
        filename, regions_info, slide_ext=slide_ext, include_image_location=include_image_location
    )


def process_annotation_folder(folder, out=None, slide_ext=SLIDE_EXT, include_image_location=False):
    """
    Summarize every annotation XML file in a folder as CSV.

    Rows are written to ``out`` (default: standard output) as soon as each
    file has been processed. A file that cannot be read contributes no rows;
    a folder that cannot be listed raises OSError.

    Returns
    -------
    merged : pd.DataFrame
        All rows written, with numeric statistics columns.
    """
    if out is None:
        out = sys.stdout
    xml_files = list_xml_files(folder)
    columns = COLUMNS + ([IMAGE_LOCATION_COLUMN] if include_image_location else [])

    write_rows(pd.DataFrame(columns=columns), out, header=True)
    all_rows = []
    for xml_path in xml_files:
        logger.info(f"Processing {xml_path.name} ...")
        rows = process_annotation_file(
            xml_path, slide_ext=slide_ext, include_image_location=include_image_location
        )
        write_rows(rows, out)
        out.flush()
        if not rows.empty:
            all_rows.append(rows)

    if not xml_files:
        logger.warning(f"No XML files found in {folder}")

    if not all_rows:
        return pd.DataFrame(columns=columns)

    merged = pd.concat(all_rows, ignore_index=True)
    logger.info(f"Wrote {len(merged)} regions from {len(xml_files)} files")
    return merged
