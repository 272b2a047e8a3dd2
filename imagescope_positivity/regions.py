"""
Merge user-drawn regions with statistics computed by the positive pixel
count algorithm.

Type "4" layers carry the regions a user drew, with their text labels.
Type "3" layers are produced by the analysis and carry one computed region
per analysed region; its ``InputRegionId`` points back at the drawn region
the numbers belong to. The meaning of each generic attribute slot is given
by the layer's ``RegionAttributeHeaders`` and has to be resolved by name for
every layer, because slot ids differ between files.
"""

import logging
from pathlib import PureWindowsPath

from .models import COMPUTED_LAYER, DRAWN_LAYER, RegionInfo

logger = logging.getLogger(__name__)

# RegionInfo field -> prefix of the attribute header name describing it
SLOT_PREFIXES = {
    "positivity": "Positivity =",
    "num_weak_positive": "Nwp =",
    "num_positive": "Np  =",
    "num_strong_positive": "Nsp =",
    "num_total": "NTotal =",
}


class MissingSlotError(LookupError):
    """A computed layer lacks the header for one of the required slots."""

    def __init__(self, slot, layer_id):
        super().__init__(f"no attribute header starting with {SLOT_PREFIXES[slot]!r} ({slot}) in layer {layer_id}")
        self.slot = slot
        self.layer_id = layer_id


def resolve_attribute_slots(layer):
    """
    Map each required statistic to the attribute slot id holding it in ``layer``.

    Parameters
    ----------
    layer : AnnotationLayer
        A computed (type "3") layer.

    Returns
    -------
    slots : dict
        RegionInfo field name -> attribute header id.

    Raises
    ------
    MissingSlotError
        If no header name starts with the prefix of one of the statistics.
    """
    slots = {}
    for field_name, prefix in SLOT_PREFIXES.items():
        header = next((h for h in layer.regions.headers if h.name.startswith(prefix)), None)
        if header is None:
            raise MissingSlotError(field_name, layer.id)
        slots[field_name] = header.id
    return slots


def image_basename(location):
    """File name part of an image path written with either separator."""
    return PureWindowsPath(location).name


def _apply_drawn_layer(layer, regions_info, filename):
    for r in layer.regions.regions:
        info = regions_info.setdefault(r.id, RegionInfo())
        info.set("text_label", r.text.strip(), region_id=r.id, filename=filename)


def _apply_computed_layer(layer, slots, regions_info, filename):
    for r in layer.regions.regions:
        target = r.input_region_id
        if target is None:
            logger.warning(
                f"In {filename}: region {r.id} of layer {layer.id} has no InputRegionId, skipping it"
            )
            continue

        if r.image_location is not None:
            name = image_basename(r.image_location)
            if name:
                regions_info.setdefault(target, RegionInfo()).set(
                    "image_location", name, region_id=target, filename=filename
                )

        values = {a.name: a.value for a in r.attributes}
        for field_name, slot_id in slots.items():
            if slot_id not in values:
                continue
            try:
                value = float(values[slot_id].strip())
            except ValueError:
                logger.warning(
                    f"In {filename}: cannot read {field_name} value {values[slot_id]!r} "
                    f"of region {r.id} (input region {target}) as a number"
                )
                continue
            regions_info.setdefault(target, RegionInfo()).set(
                field_name, value, region_id=target, filename=filename
            )


def reconcile_regions(document, filename=""):
    """
    Collect label and positivity statistics per drawn region.

    Parameters
    ----------
    document : AnnotationDocument
    filename : str, optional
        Name of the source file, used in diagnostics only.

    Returns
    -------
    regions_info : dict
        Region id -> RegionInfo. Computed statistics are stored under the
        id of the region they reference, so a drawn region and its
        statistics end up in the same record.
    """
    regions_info = {}
    first_computed = None

    for layer in document.layers:
        if layer.type == DRAWN_LAYER:
            _apply_drawn_layer(layer, regions_info, filename)

        elif layer.type == COMPUTED_LAYER:
            if first_computed is None:
                first_computed = layer.id
            else:
                logger.warning(
                    f"In {filename}: layer {layer.id} is another analysis layer after layer "
                    f"{first_computed}, its values replace earlier ones"
                )

            if not layer.regions.headers:
                logger.warning(f"In {filename}: layer {layer.id} is missing region attribute header, skipping it")
                continue
            try:
                slots = resolve_attribute_slots(layer)
            except MissingSlotError as e:
                logger.warning(f"Skipping layer {layer.id} in {filename}: missing {e.slot} ({e})")
                continue
            _apply_computed_layer(layer, slots, regions_info, filename)

        else:
            logger.debug(f"In {filename}: ignoring layer {layer.id} of type {layer.type!r}")

    return regions_info
