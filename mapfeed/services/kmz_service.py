# mapfeed/services/kmz_service.py
# KMZ export of the features currently loaded, for opening the markers in
# Google Earth or other KML viewers.

import io
import zipfile
import logging
from typing import Any, Dict, Iterable, Optional
from fastkml import KML, Document, Placemark
from pygeoif.geometry import Point
from mapfeed.models.dto import Feature

logger = logging.getLogger(__name__)

NAME_KEYS = ("name", "title", "label")

def _placemark_name(feature: Feature) -> str:
    props: Dict[str, Any] = feature.properties or {}
    for key in NAME_KEYS:
        if props.get(key):
            return str(props[key])
    return str(feature.id)

def _placemark_description(props: Optional[Dict[str, Any]]) -> str:
    if not props:
        return ""
    return "<br/>".join(f"{key}: {value}" for key, value in props.items())

def generate_kmz(features: Iterable[Feature], document_name: str = "mapfeed") -> bytes:
    """
    Builds a KMZ archive with one Placemark per feature.

    Raises:
        ValueError: If there are no features to export.
    """
    features = list(features)
    if not features:
        raise ValueError("Cannot generate KMZ without features.")

    placemarks = []
    for feature in features:
        lon, lat = feature.coordinates
        placemarks.append(
            Placemark(
                id=f"feature-{feature.id}",
                name=_placemark_name(feature),
                description=_placemark_description(feature.properties),
                geometry=Point(lon, lat),  # KML uses (lon, lat)
            )
        )

    d = Document(
        name=document_name,
        description=f"{len(features)} loaded features.",
        features=placemarks,
    )
    k = KML(features=[d])

    kml_string = k.to_string(prettyprint=True)

    kmz_buffer = io.BytesIO()
    with zipfile.ZipFile(kmz_buffer, 'w', zipfile.ZIP_DEFLATED) as kmz_file:
        # The main KML file must be named doc.kml
        kmz_file.writestr('doc.kml', kml_string.encode('utf-8'))

    logger.info(f"Generated KMZ with {len(features)} placemarks.")
    return kmz_buffer.getvalue()
