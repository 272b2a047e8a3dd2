"""Typed tree for ImageScope annotation XML and the per-region accumulator."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

logger = logging.getLogger(__name__)

COMPUTED_LAYER = "3"
DRAWN_LAYER = "4"


@dataclass
class LayerAttribute:
    name: str
    id: str
    value: str


@dataclass
class AttributeHeader:
    """Human-readable name of a generic attribute slot, e.g. ``"NTotal ="``."""
    id: str
    name: str


@dataclass
class RegionAttribute:
    """Value of one slot on a region. ``name`` holds the header id it refers to."""
    name: str
    id: str
    value: str
    display_color: str = ""


@dataclass
class RegionRecord:
    id: str
    type: str = ""
    text: str = ""
    length: str = ""
    area: str = ""
    length_microns: str = ""
    area_microns: str = ""
    negative_roa: str = ""
    analyze: str = ""
    image_location: Optional[str] = None
    input_region_id: Optional[str] = None
    attributes: List[RegionAttribute] = field(default_factory=list)


@dataclass
class RegionsBlock:
    headers: List[AttributeHeader] = field(default_factory=list)
    regions: List[RegionRecord] = field(default_factory=list)


@dataclass
class AnnotationLayer:
    """
    One <Annotation> element.

    ``type`` is kept as the raw string code: "4" for user-drawn regions,
    "3" for layers computed by an analysis algorithm.
    """
    id: str
    type: str
    name: str = ""
    attributes: List[LayerAttribute] = field(default_factory=list)
    regions: RegionsBlock = field(default_factory=RegionsBlock)


@dataclass
class AnnotationDocument:
    microns_per_pixel: str = ""
    layers: List[AnnotationLayer] = field(default_factory=list)

    @property
    def is_empty(self):
        return not self.layers


@dataclass
class RegionInfo:
    """
    Statistics collected for one user-drawn region.

    Every field starts as None ("never observed"). Defaults such as NaN or
    0 are applied only when rows are written.
    """
    text_label: Optional[str] = None
    image_location: Optional[str] = None
    positivity: Optional[float] = None
    num_weak_positive: Optional[float] = None
    num_positive: Optional[float] = None
    num_strong_positive: Optional[float] = None
    num_total: Optional[float] = None

    def set(self, name, value, region_id="", filename=""):
        """Set a field, warning if it already holds a value."""
        current = getattr(self, name)
        if current is not None:
            logger.warning(
                f"In {filename}: region {region_id} already has {name}={current!r}, "
                f"overwriting with {value!r}"
            )
        setattr(self, name, value)

    @property
    def num_all_positive(self):
        """Weak + positive + strong counts, unset or NaN components counted as zero."""
        counts = [
            v for v in (self.num_weak_positive, self.num_positive, self.num_strong_positive)
            if v is not None
        ]
        return float(np.nansum(counts))
