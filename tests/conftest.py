import pytest

from samples import DRAWN_LAYER, annotations_xml, computed_layer


@pytest.fixture
def write_xml(tmp_path):
    def _write(name, *layers, content=None):
        path = tmp_path / name
        path.write_text(content if content is not None else annotations_xml(*layers), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def slide1(write_xml):
    return write_xml("slide1.xml", DRAWN_LAYER, computed_layer())
