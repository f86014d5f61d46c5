import io
import zipfile

import pytest

from fakes import make_feature
from mapfeed.models.dto import Feature, PointGeometry
from mapfeed.services.kmz_service import generate_kmz


def read_doc(kmz: bytes) -> str:
    with zipfile.ZipFile(io.BytesIO(kmz)) as archive:
        assert archive.namelist() == ["doc.kml"]
        return archive.read("doc.kml").decode("utf-8")


def test_one_placemark_per_feature():
    doc = read_doc(generate_kmz([make_feature(1), make_feature(2)]))
    assert doc.count("<kml:Placemark") + doc.count("<Placemark") == 2
    assert "Site 1" in doc
    assert "Site 2" in doc


def test_name_falls_back_to_id():
    feature = Feature(id=99, geometry=PointGeometry(coordinates=(1.5, 2.5)), properties=None)
    doc = read_doc(generate_kmz([feature]))
    assert "99" in doc


def test_empty_export_rejected():
    with pytest.raises(ValueError):
        generate_kmz([])
