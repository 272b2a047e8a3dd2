import logging
import os
import xml.etree.ElementTree as ET
from pathlib import Path

from .models import (
    AnnotationDocument,
    AnnotationLayer,
    AttributeHeader,
    LayerAttribute,
    RegionAttribute,
    RegionRecord,
    RegionsBlock,
)

logger = logging.getLogger(__name__)


class AnnotationFormatError(ValueError):
    """An element is missing an attribute every ImageScope file carries."""


def _localname(tag):
    """Return XML local name without namespace."""
    return tag.split('}')[-1] if '}' in tag else tag


def _children(elem, name):
    return [c for c in elem if _localname(c.tag) == name]


def _child(elem, name):
    for c in elem:
        if _localname(c.tag) == name:
            return c
    return None


def _required(elem, key, xml_path):
    value = elem.attrib.get(key)
    if value is None:
        raise AnnotationFormatError(
            f"<{_localname(elem.tag)}> without required '{key}' attribute in {xml_path}"
        )
    return value


def _attribute_elems(parent):
    """Return the <Attribute> elements found under an <Attributes> child."""
    block = _child(parent, 'Attributes')
    return _children(block, 'Attribute') if block is not None else []


def _parse_region(elem, xml_path):
    a = elem.attrib
    return RegionRecord(
        id=_required(elem, 'Id', xml_path),
        type=a.get('Type', ''),
        text=a.get('Text', ''),
        length=a.get('Length', ''),
        area=a.get('Area', ''),
        length_microns=a.get('LengthMicrons', ''),
        area_microns=a.get('AreaMicrons', ''),
        negative_roa=a.get('NegativeROA', ''),
        analyze=a.get('Analyze', ''),
        image_location=a.get('ImageLocation'),
        input_region_id=a.get('InputRegionId'),
        attributes=[
            RegionAttribute(
                name=_required(at, 'Name', xml_path),
                id=at.attrib.get('Id', ''),
                value=_required(at, 'Value', xml_path),
                display_color=at.attrib.get('DisplayColor', ''),
            )
            for at in _attribute_elems(elem)
        ],
    )


def _parse_layer(elem, xml_path):
    regions = RegionsBlock()
    regions_elem = _child(elem, 'Regions')
    if regions_elem is not None:
        headers_elem = _child(regions_elem, 'RegionAttributeHeaders')
        if headers_elem is not None:
            regions.headers = [
                AttributeHeader(id=_required(h, 'Id', xml_path), name=_required(h, 'Name', xml_path))
                for h in _children(headers_elem, 'AttributeHeader')
            ]
        regions.regions = [_parse_region(r, xml_path) for r in _children(regions_elem, 'Region')]

    return AnnotationLayer(
        id=_required(elem, 'Id', xml_path),
        type=_required(elem, 'Type', xml_path),
        name=elem.attrib.get('Name', ''),
        attributes=[
            LayerAttribute(
                name=_required(at, 'Name', xml_path),
                id=at.attrib.get('Id', ''),
                value=_required(at, 'Value', xml_path),
            )
            for at in _attribute_elems(elem)
        ],
        regions=regions,
    )


def parse_annotation_xml(xml_path):
    """
    Parse an ImageScope annotation XML file.

    Parameters
    ----------
    xml_path : str or Path
        Path to the annotation XML file.

    Returns
    -------
    document : AnnotationDocument
        Layers in the order they appear in the file.

    Raises
    ------
    xml.etree.ElementTree.ParseError
        If the file is not well-formed XML.
    AnnotationFormatError
        If a layer, region, header or attribute lacks a required attribute.
    """
    tree = ET.parse(xml_path)
    root = tree.getroot()

    layers = [_parse_layer(elem, xml_path) for elem in _children(root, 'Annotation')]
    return AnnotationDocument(
        microns_per_pixel=root.attrib.get('MicronsPerPixel', ''),
        layers=layers,
    )


def read_annotation_xml(xml_path):
    """Like parse_annotation_xml, but returns an empty document on failure."""
    try:
        return parse_annotation_xml(xml_path)
    except (ET.ParseError, AnnotationFormatError, OSError) as e:
        logger.warning(f"Unable to read {os.path.basename(xml_path)}, no regions reported: {e}")
        return AnnotationDocument()


def list_xml_files(folder):
    """
    Return the .xml files (any case) directly inside ``folder``, sorted by name.

    Raises
    ------
    FileNotFoundError, NotADirectoryError
        If the folder cannot be listed.
    """
    folder = Path(folder)
    return sorted(
        (p for p in folder.iterdir() if p.is_file() and p.suffix.lower() == '.xml'),
        key=lambda p: p.name,
    )
